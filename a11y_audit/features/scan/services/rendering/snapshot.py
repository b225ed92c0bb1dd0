"""
Read-only view over one rendered page.

The renderer stamps every element with ``data-a11y-node`` before serializing the
DOM, and captures the computed styles for each stamp. Checks only ever see a
Snapshot, never the WebDriver, so they can be run against static markup too.
"""
from typing import Dict, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

NODE_ATTR = "data-a11y-node"

STYLE_PROPERTIES = (
    "color",
    "background-color",
    "font-size",
    "font-weight",
    "display",
    "visibility",
)

# Used when a style was not captured (static markup, detached nodes).
DEFAULT_STYLE = {
    "color": "rgb(0, 0, 0)",
    "background-color": "rgba(0, 0, 0, 0)",
    "font-size": "16px",
    "font-weight": "400",
    "display": "inline",
    "visibility": "visible",
}


class Snapshot:
    def __init__(
        self,
        html: str,
        url: str,
        styles: Optional[Dict[str, Dict[str, str]]] = None,
        title: Optional[str] = None,
    ):
        self._soup = BeautifulSoup(html or "", "html.parser")
        self._styles = {str(k): dict(v) for k, v in (styles or {}).items()}
        self.url = url
        if title is None:
            title_tag = self._soup.find("title")
            title = title_tag.get_text() if title_tag else ""
        self.title = title.strip()

    @classmethod
    def from_html(cls, html: str, url: str = "https://example.com/", styles=None) -> "Snapshot":
        """
        Build a snapshot from static markup.

        ``styles`` maps a ``data-a11y-node`` value to computed style values.
        """
        return cls(html, url, styles=styles)

    @property
    def root(self) -> Optional[Tag]:
        return self._soup.find("html")

    def select(self, selector: str) -> List[Tag]:
        return self._soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self._soup.select_one(selector)

    def attr(self, element: Tag, name: str) -> Optional[str]:
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_attr(self, element: Tag, name: str) -> bool:
        return element.has_attr(name)

    def text(self, element: Tag) -> str:
        return element.get_text(" ", strip=True)

    def own_text(self, element: Tag) -> str:
        """Text of the direct text-node children only."""
        parts = [
            str(child).strip()
            for child in element.children
            if type(child) is NavigableString
        ]
        return " ".join(p for p in parts if p)

    def computed_style(self, element: Tag, prop: str) -> str:
        node_id = element.get(NODE_ATTR)
        style = self._styles.get(node_id, {}) if node_id is not None else {}
        if prop in style:
            return style[prop]
        return DEFAULT_STYLE.get(prop, "")

    def ancestors(self, element: Tag) -> Iterator[Tag]:
        for parent in element.parents:
            if isinstance(parent, Tag) and parent.name != "[document]":
                yield parent

    def is_visible(self, element: Tag) -> bool:
        if self.computed_style(element, "visibility") in ("hidden", "collapse"):
            return False
        if self.computed_style(element, "display") == "none":
            return False
        return all(self.computed_style(a, "display") != "none" for a in self.ancestors(element))

    def outer_html(self, element: Tag, max_length: Optional[int] = None) -> str:
        clone = BeautifulSoup(str(element), "html.parser")
        for tag in clone.find_all(attrs={NODE_ATTR: True}):
            del tag[NODE_ATTR]
        html = str(clone)
        if max_length is not None and len(html) > max_length:
            html = html[:max_length]
        return html
