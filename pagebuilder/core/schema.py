"""Attribute schema: the static description of every editable property.

Each property belongs to exactly one tab (``content``, ``style`` or
``advanced``) and one UI section within that tab. The registry below is the
single place where property names are spelled out; the compiler, the
organizer and the editor all go through :func:`describe` and
:func:`canonical_name`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Literal, Optional, Tuple

logger = logging.getLogger(__name__)

Tab = Literal["content", "style", "advanced"]
Control = Literal["text", "textarea", "number", "select", "color", "checkbox"]

TABS: Tuple[str, ...] = ("content", "style", "advanced")
DEFAULT_TAB = "content"
DEFAULT_SECTION = "general"


@dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    label: str
    tab: str
    section: str
    control: str = "text"
    default_unit: str = ""
    options: Tuple[str, ...] = ()
    applies_to: frozenset = field(default_factory=frozenset)

    def applies(self, kind_key: str) -> bool:
        return not self.applies_to or kind_key in self.applies_to


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""


def _p(
    name: str,
    label: str,
    tab: str,
    section: str,
    control: str = "text",
    unit: str = "",
    options: Iterable[str] = (),
) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        label=label,
        tab=tab,
        section=section,
        control=control,
        default_unit=unit,
        options=tuple(options),
    )


# ------------------------------------------------------------- Style tab --

TYPOGRAPHY = [
    _p("font-family", "Font Family", "style", "typography"),
    _p("font-size", "Font Size", "style", "typography", "number", "px"),
    _p("font-weight", "Font Weight", "style", "typography", "select", options=(
        "normal", "100", "200", "300", "400", "500", "600", "700", "800", "900", "bold")),
    _p("text-transform", "Text Transform", "style", "typography", "select",
       options=("none", "uppercase", "lowercase", "capitalize")),
    _p("font-style", "Font Style", "style", "typography", "select",
       options=("normal", "italic", "oblique")),
    _p("text-decoration", "Text Decoration", "style", "typography", "select",
       options=("none", "underline", "overline", "line-through")),
    _p("line-height", "Line Height", "style", "typography", "number"),
    _p("letter-spacing", "Letter Spacing", "style", "typography", "number", "px"),
    _p("word-spacing", "Word Spacing", "style", "typography", "number", "px"),
    _p("text-align", "Text Align", "style", "typography", "select",
       options=("left", "center", "right", "justify")),
]

COLORS = [
    _p("color", "Text Color", "style", "colors", "color"),
    _p("background-color", "Background Color", "style", "colors", "color"),
    _p("border-color", "Border Color", "style", "colors", "color"),
]

SPACING = [
    _p(f"{box}-{side}", f"{box.title()} {side.title()}", "style", "spacing", "number", "px")
    for box in ("margin", "padding")
    for side in ("top", "right", "bottom", "left")
]

BORDER = [
    _p("border-width", "Border Width", "style", "border", "number", "px"),
    _p("border-style", "Border Style", "style", "border", "select", options=(
        "none", "solid", "dashed", "dotted", "double", "groove", "ridge", "inset", "outset")),
    _p("border-radius", "Border Radius", "style", "border", "number", "px"),
    _p("border-top-left-radius", "Top Left Radius", "style", "border", "number", "px"),
    _p("border-top-right-radius", "Top Right Radius", "style", "border", "number", "px"),
    _p("border-bottom-right-radius", "Bottom Right Radius", "style", "border", "number", "px"),
    _p("border-bottom-left-radius", "Bottom Left Radius", "style", "border", "number", "px"),
]

BOX_SHADOW = [
    _p("box-shadow-h", "Horizontal", "style", "box-shadow", "number", "px"),
    _p("box-shadow-v", "Vertical", "style", "box-shadow", "number", "px"),
    _p("box-shadow-blur", "Blur", "style", "box-shadow", "number", "px"),
    _p("box-shadow-spread", "Spread", "style", "box-shadow", "number", "px"),
    _p("box-shadow-color", "Shadow Color", "style", "box-shadow", "color"),
    _p("box-shadow-position", "Position", "style", "box-shadow", "select", options=("outset", "inset")),
]

BACKGROUND = [
    _p("background-type", "Background Type", "style", "background", "select",
       options=("none", "color", "gradient", "image")),
    _p("background-image", "Background Image URL", "style", "background"),
    _p("background-position", "Position", "style", "background", "select", options=(
        "center center", "top left", "top center", "top right", "center left",
        "center right", "bottom left", "bottom center", "bottom right")),
    _p("background-size", "Size", "style", "background", "select",
       options=("auto", "cover", "contain", "100% 100%")),
    _p("background-repeat", "Repeat", "style", "background", "select",
       options=("no-repeat", "repeat", "repeat-x", "repeat-y")),
    _p("background-attachment", "Attachment", "style", "background", "select",
       options=("scroll", "fixed", "local")),
]

LAYOUT = [
    _p("width", "Width", "style", "layout", "number", "px"),
    _p("height", "Height", "style", "layout", "number", "px"),
    _p("min-width", "Min Width", "style", "layout", "number", "px"),
    _p("max-width", "Max Width", "style", "layout", "number", "px"),
    _p("min-height", "Min Height", "style", "layout", "number", "px"),
    _p("max-height", "Max Height", "style", "layout", "number", "px"),
    _p("display", "Display", "style", "layout", "select", options=(
        "block", "inline", "inline-block", "flex", "inline-flex", "grid", "none")),
    _p("overflow", "Overflow", "style", "layout", "select",
       options=("visible", "hidden", "scroll", "auto")),
    _p("vertical-align", "Vertical Align", "style", "layout", "select", options=(
        "baseline", "top", "middle", "bottom", "text-top", "text-bottom")),
]

FLEX = [
    _p("flex-direction", "Direction", "style", "layout", "select",
       options=("row", "row-reverse", "column", "column-reverse")),
    _p("justify-content", "Justify Content", "style", "layout", "select", options=(
        "flex-start", "center", "flex-end", "space-between", "space-around", "space-evenly")),
    _p("align-items", "Align Items", "style", "layout", "select",
       options=("flex-start", "center", "flex-end", "stretch", "baseline")),
    _p("flex-wrap", "Flex Wrap", "style", "layout", "select", options=("nowrap", "wrap", "wrap-reverse")),
    _p("gap", "Column Gap", "style", "layout", "number", "px"),
]

COLUMN_SIZING = [
    _p("flex-basis", "Column Width", "style", "layout", "number", "%"),
    _p("flex-grow", "Flex Grow", "style", "layout", "number"),
]

# ---------------------------------------------------------- Advanced tab --

POSITION = [
    _p("position", "Position", "advanced", "position", "select",
       options=("static", "relative", "absolute", "fixed", "sticky")),
    _p("top", "Top", "advanced", "position", "number", "px"),
    _p("right", "Right", "advanced", "position", "number", "px"),
    _p("bottom", "Bottom", "advanced", "position", "number", "px"),
    _p("left", "Left", "advanced", "position", "number", "px"),
    _p("z-index", "Z-Index", "advanced", "position", "number"),
]

ANIMATION_NAMES: Tuple[str, ...] = (
    "none", "fadeIn", "fadeOut", "slideInLeft", "slideInRight", "slideInUp",
    "slideInDown", "zoomIn", "zoomOut", "bounce", "pulse", "shake",
)

ANIMATION = [
    _p("animation-name", "Animation", "advanced", "animation", "select", options=ANIMATION_NAMES),
    _p("animation-duration", "Duration", "advanced", "animation", "number", "s"),
    _p("animation-delay", "Delay", "advanced", "animation", "number", "s"),
    _p("animation-timing-function", "Timing", "advanced", "animation", "select",
       options=("ease", "linear", "ease-in", "ease-out", "ease-in-out")),
    _p("animation-iteration-count", "Repeat", "advanced", "animation", "select",
       options=("1", "2", "3", "infinite")),
]

RESPONSIVE = [
    _p("hide-desktop", "Hide on Desktop", "advanced", "responsive", "checkbox"),
    _p("hide-tablet", "Hide on Tablet", "advanced", "responsive", "checkbox"),
    _p("hide-mobile", "Hide on Mobile", "advanced", "responsive", "checkbox"),
    _p("visibility", "Visibility", "advanced", "responsive", "select",
       options=("visible", "hidden", "collapse")),
    _p("opacity", "Opacity", "advanced", "responsive", "number"),
]

CUSTOM_CSS = [
    _p("css-classes", "CSS Classes", "advanced", "css"),
    _p("css-id", "CSS ID", "advanced", "css"),
    _p("custom-css", "Custom CSS", "advanced", "css", "textarea"),
]

# ----------------------------------------------------------- Content tab --

CONTENT = [
    _p("text", "Text", "content", "content", "textarea"),
    _p("level", "HTML Tag", "content", "content", "select",
       options=("h1", "h2", "h3", "h4", "h5", "h6")),
    _p("link", "Link", "content", "link"),
    _p("target", "Open In", "content", "link", "select", options=("_self", "_blank")),
    _p("src", "Source URL", "content", "content"),
    _p("alt", "Alt Text", "content", "content"),
    _p("icon", "Icon", "content", "content"),
    _p("video-url", "Video URL", "content", "content"),
    _p("autoplay", "Autoplay", "content", "settings", "checkbox"),
    _p("controls", "Show Controls", "content", "settings", "checkbox"),
    _p("space", "Space", "content", "content", "number", "px"),
    _p("anchor-id", "Anchor ID", "content", "content"),
    _p("citation", "Citation", "content", "content"),
    _p("items", "Items", "content", "items", "textarea"),
    _p("list-layout", "Layout", "content", "settings", "select", options=("vertical", "horizontal")),
    _p("separator", "Separator", "content", "settings"),
    _p("show-home", "Show Home", "content", "settings", "checkbox"),
    _p("due-date", "Due Date", "content", "settings"),
    _p("expired-text", "Expired Text", "content", "settings"),
    _p("tab-titles", "Tab Titles", "content", "items", "textarea"),
    _p("panel-position", "Panel Position", "content", "settings", "select", options=("left", "right")),
    _p("form-action", "Form Action", "content", "settings"),
    _p("submit-text", "Submit Text", "content", "content"),
]

_ALL_GROUPS = (
    CONTENT, TYPOGRAPHY, COLORS, SPACING, BORDER, BOX_SHADOW, BACKGROUND,
    LAYOUT, FLEX, COLUMN_SIZING, POSITION, ANIMATION, RESPONSIVE, CUSTOM_CSS,
)


def _names(*groups: List[PropertyDescriptor]) -> List[str]:
    seen: Dict[str, None] = {}
    for group in groups:
        for descriptor in group:
            seen.setdefault(descriptor.name, None)
    return list(seen)


_ADVANCED = _names(POSITION, ANIMATION, RESPONSIVE, CUSTOM_CSS)
_BOX_STYLE = _names(COLORS, SPACING, BORDER, BOX_SHADOW)
_CONTENT_WIDGET_STYLE = _names(TYPOGRAPHY) + _BOX_STYLE + _names(LAYOUT)
_MEDIA_WIDGET_STYLE = _BOX_STYLE + _names(LAYOUT)
_CONTAINER_STYLE = _names(BACKGROUND) + _BOX_STYLE + _names(LAYOUT, FLEX)

_WIDGET_CONTENT: Dict[str, List[str]] = {
    "heading": ["text", "level", "link", "target"],
    "text": ["text"],
    "button": ["text", "link", "target"],
    "image": ["src", "alt", "link", "target"],
    "icon": ["icon", "link", "target"],
    "video": ["video-url", "autoplay", "controls"],
    "spacer": ["space"],
    "divider": [],
    "menu-anchor": ["anchor-id"],
    "blockquote": ["text", "citation"],
    "site-logo": ["src", "alt", "link"],
    "icon-list": ["items", "list-layout"],
    "breadcrumbs": ["separator", "show-home"],
    "countdown": ["due-date", "expired-text"],
    "tabs": ["tab-titles"],
    "off-canvas": ["text", "panel-position"],
    "form": ["form-action", "submit-text"],
}
_MEDIA_WIDGETS = {"image", "video", "spacer", "divider", "site-logo", "menu-anchor"}

TRAIT_SETS: Dict[str, List[str]] = {
    "section": _CONTAINER_STYLE + _ADVANCED,
    "column": _CONTAINER_STYLE + _names(COLUMN_SIZING) + _ADVANCED,
    "inner-section": _CONTAINER_STYLE + _ADVANCED,
    "inner-column": _CONTAINER_STYLE + _names(COLUMN_SIZING) + _ADVANCED,
}
for _widget, _content in _WIDGET_CONTENT.items():
    _style = _MEDIA_WIDGET_STYLE if _widget in _MEDIA_WIDGETS else _CONTENT_WIDGET_STYLE
    TRAIT_SETS[_widget] = list(_content) + _style + _ADVANCED
# Fallback set for widget types without a dedicated entry.
TRAIT_SETS["widget"] = ["text"] + _CONTENT_WIDGET_STYLE + _ADVANCED


def _build_registry() -> Dict[str, PropertyDescriptor]:
    owners: Dict[str, set] = {}
    for kind_key, names in TRAIT_SETS.items():
        for name in names:
            owners.setdefault(name, set()).add(kind_key)
    registry: Dict[str, PropertyDescriptor] = {}
    for group in _ALL_GROUPS:
        for descriptor in group:
            if descriptor.name in registry:
                raise ValueError(f"Property {descriptor.name!r} registered twice")
            registry[descriptor.name] = replace(
                descriptor, applies_to=frozenset(owners.get(descriptor.name, ()))
            )
    return registry


PROPERTIES: Dict[str, PropertyDescriptor] = _build_registry()


_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")


def canonical_name(name: str) -> str:
    """Map ``paddingTop`` / ``padding_top`` / ``padding-top`` to ``padding-top``."""
    if name in PROPERTIES:
        return name
    text = _ACRONYM_BOUNDARY.sub(r"\1-\2", str(name).strip())
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    return text.replace("_", "-").replace(" ", "-").lower()


def lookup(name: str) -> Optional[PropertyDescriptor]:
    return PROPERTIES.get(canonical_name(name))


def describe(name: str) -> PropertyDescriptor:
    """Return the descriptor for ``name``; unknown names land in content/general."""
    key = canonical_name(name)
    descriptor = PROPERTIES.get(key)
    if descriptor is None:
        logger.debug("Unknown property %r, classified as %s/%s", name, DEFAULT_TAB, DEFAULT_SECTION)
        return PropertyDescriptor(
            name=key,
            label=format_section_title(key),
            tab=DEFAULT_TAB,
            section=DEFAULT_SECTION,
        )
    return descriptor


def properties_for(kind_key: str) -> List[str]:
    """Ordered trait set for a node kind (``section``, ``column`` ...) or widget type."""
    names = TRAIT_SETS.get(kind_key)
    if names is None:
        names = TRAIT_SETS["widget"]
    return list(names)


_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off", ""}


def validate_value(name: str, value: object) -> ValidationResult:
    """Check the shape of an edited value before it reaches the tree."""
    if value is None:
        return ValidationResult(True)
    descriptor = describe(name)
    if isinstance(value, (dict, list, tuple, set)):
        return ValidationResult(False, f"{descriptor.label} expects a single value")
    control = descriptor.control
    if control == "checkbox":
        if isinstance(value, bool) or value in (0, 1):
            return ValidationResult(True)
        if isinstance(value, str) and value.strip().lower() in _TRUE_WORDS | _FALSE_WORDS:
            return ValidationResult(True)
        return ValidationResult(False, f"{descriptor.label} expects on/off")
    if control == "select" and descriptor.options:
        if value == "" or str(value) in descriptor.options:
            return ValidationResult(True)
        return ValidationResult(
            False, f"{descriptor.label} must be one of: {', '.join(descriptor.options)}"
        )
    return ValidationResult(True)


def format_section_title(section: str) -> str:
    """``box-shadow`` -> ``Box Shadow``; ``fontSize`` -> ``Font Size``."""
    text = _CAMEL_BOUNDARY.sub(r"\1 \2", section)
    words = re.split(r"[\s_\-]+", text)
    return " ".join(word[:1].upper() + word[1:].lower() for word in words if word)
