"""
The accessibility checks.

Every check is a pure function of a Snapshot and returns at most one
Violation summarising all offending elements on the page, or None.
"""
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from a11y_audit.features.scan.schemas.violation import Impact, Principle, Violation
from a11y_audit.features.scan.services.checks.color import (
    composite,
    contrast_ratio,
    is_opaque,
    is_transparent,
    parse_color,
    parse_font_size,
    parse_font_weight,
    required_ratio,
    to_hex,
)
from a11y_audit.features.scan.services.rendering.snapshot import Snapshot
from a11y_audit.platform.config import settings

EXCLUDED_INPUT_TYPES = {"hidden", "submit", "button"}
MOUSE_HANDLERS = ("onclick", "onmousedown", "onmouseup")
KEYBOARD_HANDLERS = ("onkeydown", "onkeyup", "onkeypress")
FOCUSABLE_SELECTOR = "a[href], button, input, select, textarea, [tabindex]"
NON_TEXT_TAGS = {
    "html", "head", "title", "meta", "link", "script", "style",
    "noscript", "template", "svg", "iframe", "object",
}


def _build_violation(
    snapshot: Snapshot,
    offenders: List[Tag],
    *,
    violation_id: str,
    description: str,
    impact: Impact,
    wcag_level: str,
    principle: Principle,
    recommendation: str,
    fix_example: Optional[str] = None,
    code_example: Optional[str] = None,
    count: Optional[int] = None,
) -> Optional[Violation]:
    count = len(offenders) if count is None else count
    if count <= 0:
        return None
    if code_example is None and offenders:
        code_example = snapshot.outer_html(offenders[0], settings.CODE_EXAMPLE_MAX_LENGTH)
    return Violation(
        id=violation_id,
        description=description,
        impact=impact,
        count=count,
        wcag_level=wcag_level,
        principle=principle,
        code_example=code_example,
        recommendation=recommendation,
        fix_example=fix_example,
    )


def _rewrite_attributes(snapshot: Snapshot, element: Tag, set_attrs=None, remove=()) -> str:
    """Outer HTML of ``element`` with its attributes edited on a parsed copy."""
    fragment = BeautifulSoup(snapshot.outer_html(element), "html.parser")
    tag = fragment.find(element.name)
    for name in remove:
        if tag.has_attr(name):
            del tag[name]
    for name, value in (set_attrs or {}).items():
        tag[name] = value
    return str(fragment)[:settings.CODE_EXAMPLE_MAX_LENGTH]


def check_image_alt(snapshot: Snapshot) -> Optional[Violation]:
    offenders = [
        img for img in snapshot.select("img")
        if not (snapshot.attr(img, "alt") or "").strip()
    ]
    fix = None
    if offenders:
        fix = _rewrite_attributes(
            snapshot, offenders[0], set_attrs={"alt": "Descriptive text for this image"}
        )
    return _build_violation(
        snapshot,
        offenders,
        violation_id="image-alt",
        description="Images Without Alt Text",
        impact=Impact.critical,
        wcag_level="1.1.1 (Level A)",
        principle=Principle.perceivable,
        recommendation=(
            "Add descriptive alt text to images that convey information. "
            "Use empty alt attributes for decorative images."
        ),
        fix_example=fix,
    )


def _has_accessible_label(snapshot: Snapshot, control: Tag, label_targets: set) -> bool:
    if (snapshot.attr(control, "aria-label") or "").strip():
        return True
    if (snapshot.attr(control, "aria-labelledby") or "").strip():
        return True
    control_id = snapshot.attr(control, "id")
    if control_id and control_id in label_targets:
        return True
    return any(parent.name == "label" for parent in snapshot.ancestors(control))


def check_form_labels(snapshot: Snapshot) -> Optional[Violation]:
    label_targets = {
        snapshot.attr(label, "for") for label in snapshot.select("label[for]")
    }
    offenders = []
    for control in snapshot.select("input, select, textarea"):
        if control.name == "input":
            input_type = (snapshot.attr(control, "type") or "text").strip().lower()
            if input_type in EXCLUDED_INPUT_TYPES:
                continue
        if not _has_accessible_label(snapshot, control, label_targets):
            offenders.append(control)

    fix = None
    if offenders:
        target = snapshot.attr(offenders[0], "id") or "sample-id"
        sample = snapshot.outer_html(offenders[0], settings.CODE_EXAMPLE_MAX_LENGTH)
        fix = f'<label for="{target}">Descriptive Label</label>\n{sample}'
    return _build_violation(
        snapshot,
        offenders,
        violation_id="label",
        description="Form Elements Do Not Have Labels",
        impact=Impact.critical,
        wcag_level="3.3.2 (Level A)",
        principle=Principle.understandable,
        recommendation=(
            "Associate labels with their form controls using the \"for\" attribute "
            "that matches the input's id, or wrap the control in a label."
        ),
        fix_example=fix,
    )


def check_heading_order(snapshot: Snapshot) -> Optional[Violation]:
    offenders = []
    previous_level = 0
    for index, heading in enumerate(snapshot.select("h1, h2, h3, h4, h5, h6")):
        level = int(heading.name[1])
        if index == 0 and level != 1:
            offenders.append(heading)
        elif index > 0 and level > previous_level + 1:
            offenders.append(heading)
        previous_level = level

    return _build_violation(
        snapshot,
        offenders,
        violation_id="heading-order",
        description="Improper Heading Structure",
        impact=Impact.moderate,
        wcag_level="1.3.1 (Level A)",
        principle=Principle.perceivable,
        recommendation=(
            "Use heading elements in a hierarchical manner, starting with h1 "
            "and not skipping levels."
        ),
        fix_example=(
            "Ensure proper heading structure: <h1>Page Title</h1> followed by "
            "<h2>Section</h2> then <h3>Subsection</h3>"
        ),
    )


def _effective_background(snapshot: Snapshot, element: Tag):
    """
    Background the text is drawn on, with translucent layers blended down to
    the nearest opaque ancestor. None when no opaque layer exists.
    """
    layers = []
    for node in [element, *snapshot.ancestors(element)]:
        background = parse_color(snapshot.computed_style(node, "background-color"))
        if is_transparent(background):
            continue
        if is_opaque(background):
            resolved = background
            for layer in reversed(layers):
                resolved = composite(layer, resolved)
            return resolved
        layers.append(background)
    return None


def check_color_contrast(snapshot: Snapshot) -> Optional[Violation]:
    offenders = []
    failing_styles = []
    for element in snapshot.select("body *"):
        if element.name in NON_TEXT_TAGS:
            continue
        if not snapshot.own_text(element):
            continue
        if not snapshot.is_visible(element):
            continue

        foreground = parse_color(snapshot.computed_style(element, "color"))
        background = _effective_background(snapshot, element)
        if foreground is None or background is None:
            continue
        if not is_opaque(foreground):
            foreground = composite(foreground, background)

        size = parse_font_size(snapshot.computed_style(element, "font-size"))
        weight = parse_font_weight(snapshot.computed_style(element, "font-weight"))
        if contrast_ratio(foreground, background) < required_ratio(size, weight):
            offenders.append(element)
            failing_styles.append((foreground, background))

    if not offenders:
        return None

    sample = offenders[0]
    foreground, background = failing_styles[0]
    tag = sample.name
    text = snapshot.own_text(sample)[:100] or "Text content"
    return _build_violation(
        snapshot,
        offenders,
        violation_id="color-contrast",
        description="Insufficient Color Contrast",
        impact=Impact.serious,
        wcag_level="1.4.3 (Level AA)",
        principle=Principle.perceivable,
        recommendation="Use a color contrast ratio of at least 4.5:1 for normal text and 3:1 for large text.",
        code_example=(
            f'<{tag} style="color: {to_hex(foreground)}; background-color: {to_hex(background)}">'
            f"\n  {text}\n</{tag}>"
        ),
        fix_example=f'<{tag} style="color: #595959; background-color: #ffffff">\n  {text}\n</{tag}>',
        count=min(len(offenders), settings.CONTRAST_VIOLATION_CAP),
    )


def check_keyboard_access(snapshot: Snapshot) -> Optional[Violation]:
    offenders = []
    for element in snapshot.select("[tabindex], [onclick], [onmousedown], [onmouseup]"):
        if (snapshot.attr(element, "tabindex") or "").strip() == "-1":
            offenders.append(element)
            continue
        has_mouse = any(snapshot.has_attr(element, h) for h in MOUSE_HANDLERS)
        has_keyboard = any(snapshot.has_attr(element, h) for h in KEYBOARD_HANDLERS)
        if has_mouse and not has_keyboard:
            offenders.append(element)

    fix = None
    if offenders:
        sample = offenders[0]
        if sample.name == "div":
            fix = f'<button type="button">{snapshot.text(sample)}</button>'
        else:
            fix = _rewrite_attributes(
                snapshot,
                sample,
                set_attrs={"tabindex": "0", "onkeydown": "if(event.key==='Enter')this.click()"},
            )
    return _build_violation(
        snapshot,
        offenders,
        violation_id="keyboard",
        description="Elements Not Keyboard Accessible",
        impact=Impact.serious,
        wcag_level="2.1.1 (Level A)",
        principle=Principle.operable,
        recommendation=(
            "Ensure all interactive elements are accessible via keyboard. Use native "
            "buttons and links, and pair mouse handlers with keyboard handlers."
        ),
        fix_example=fix,
    )


def check_document_language(snapshot: Snapshot) -> Optional[Violation]:
    root = snapshot.root
    if root is not None and (
        (snapshot.attr(root, "lang") or "").strip()
        or (snapshot.attr(root, "xml:lang") or "").strip()
    ):
        return None
    return _build_violation(
        snapshot,
        [],
        violation_id="html-lang",
        description="Missing Document Language",
        impact=Impact.serious,
        wcag_level="3.1.1 (Level A)",
        principle=Principle.understandable,
        recommendation="Specify the language of your document using the lang attribute on the html element.",
        code_example="<html>\n  <head>...</head>\n  <body>...</body>\n</html>",
        fix_example='<html lang="en">\n  <head>...</head>\n  <body>...</body>\n</html>',
        count=1,
    )


def check_document_title(snapshot: Snapshot) -> Optional[Violation]:
    if snapshot.title:
        return None
    return _build_violation(
        snapshot,
        [],
        violation_id="document-title",
        description="Missing Document Title",
        impact=Impact.serious,
        wcag_level="2.4.2 (Level A)",
        principle=Principle.operable,
        recommendation="Give every page a short, unique <title> that describes its purpose.",
        code_example="<head>\n  <title></title>\n</head>",
        fix_example="<head>\n  <title>Contact Us | Example Company</title>\n</head>",
        count=1,
    )


def check_aria_hidden_focus(snapshot: Snapshot) -> Optional[Violation]:
    focusable = {id(element) for element in snapshot.select(FOCUSABLE_SELECTOR)}
    offenders = [
        element for element in snapshot.select('[aria-hidden="true"]')
        if id(element) in focusable or element.select_one(FOCUSABLE_SELECTOR) is not None
    ]

    fix = None
    if offenders:
        fix = _rewrite_attributes(snapshot, offenders[0], remove=("aria-hidden",))
    return _build_violation(
        snapshot,
        offenders,
        violation_id="aria-hidden-focus",
        description="ARIA Hidden Element Contains Focusable Element",
        impact=Impact.serious,
        wcag_level="4.1.2 (Level A)",
        principle=Principle.robust,
        recommendation='Do not include focusable elements inside elements with aria-hidden="true".',
        fix_example=fix,
    )
