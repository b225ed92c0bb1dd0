import logging
from typing import List
from urllib.parse import urldefrag, urljoin, urlparse

from a11y_audit.features.scan.services.rendering.snapshot import Snapshot

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES = ("javascript:", "mailto:", "tel:", "#")


def discover_links(snapshot: Snapshot, origin_host: str) -> List[str]:
    """
    Same-host links on a rendered page, in order of first appearance.

    Args:
        snapshot: Rendered page
        origin_host: Hostname links must match (e.g. "example.com")

    Returns:
        Absolute URLs with fragments removed, deduplicated
    """
    origin_host = (origin_host or "").lower()
    seen = set()
    links = []

    for anchor in snapshot.select("a[href]"):
        href = (snapshot.attr(anchor, "href") or "").strip()
        if not href or href.lower().startswith(SKIPPED_PREFIXES):
            continue

        absolute, _fragment = urldefrag(urljoin(snapshot.url, href))
        if not _is_same_host(absolute, origin_host):
            continue
        key = page_key(absolute)
        if key in seen:
            continue
        seen.add(key)
        links.append(absolute)

    logger.info(f"Discovered {len(links)} same-origin links on {snapshot.url}")
    return links


def _is_same_host(url: str, origin_host: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    return (parsed.hostname or "").lower() == origin_host


def page_key(url: str):
    """Identity of a page for deduplication: scheme, lowercased host, path and query."""
    parsed = urlparse(urldefrag(url)[0])
    return parsed.scheme.lower(), parsed.netloc.lower(), parsed.path or "/", parsed.query
