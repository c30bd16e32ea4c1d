"""Style compiler: a node's attribute bag in, the node's CSS text out.

The compiler is a pure function. Every sub-step only adds declarations for the
attributes that are present, so an empty bag compiles to an empty string.
Malformed values are never rejected here; they are stringified and emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from . import config
from .schema import canonical_name
from .units import is_set, is_truthy_flag, normalize_unit


@dataclass(frozen=True)
class Breakpoint:
    name: str
    attribute: str
    min_width: Optional[int]
    max_width: Optional[int]

    @property
    def media_query(self) -> str:
        parts = []
        if self.min_width is not None:
            parts.append(f"(min-width: {self.min_width}px)")
        if self.max_width is not None:
            parts.append(f"(max-width: {self.max_width}px)")
        return "@media " + " and ".join(parts)

    def contains(self, width: int) -> bool:
        if self.min_width is not None and width < self.min_width:
            return False
        if self.max_width is not None and width > self.max_width:
            return False
        return True


BREAKPOINTS = (
    Breakpoint("desktop", "hide-desktop", config.DESKTOP_MIN_WIDTH, None),
    Breakpoint("tablet", "hide-tablet", config.TABLET_MIN_WIDTH, config.TABLET_MAX_WIDTH),
    Breakpoint("mobile", "hide-mobile", None, config.MOBILE_MAX_WIDTH),
)

Rules = Dict[str, str]

_TYPOGRAPHY_UNITS = {
    "font-family": None,
    "font-size": "px",
    "font-weight": None,
    "text-transform": None,
    "font-style": None,
    "text-decoration": None,
    "line-height": "",
    "letter-spacing": "px",
    "word-spacing": "px",
    "text-align": None,
    "vertical-align": None,
}
_COLOR_PROPS = ("color", "background-color", "border-color")
_SPACING_PROPS = tuple(
    f"{box}-{side}" for box in ("margin", "padding") for side in ("top", "right", "bottom", "left")
)
_BORDER_UNITS = {
    "border-width": "px",
    "border-style": None,
    "border-radius": "px",
    "border-top-left-radius": "px",
    "border-top-right-radius": "px",
    "border-bottom-right-radius": "px",
    "border-bottom-left-radius": "px",
}
_BACKGROUND_EXTRAS = (
    "background-position",
    "background-size",
    "background-repeat",
    "background-attachment",
)
_DIMENSION_UNITS = {
    "width": "px",
    "height": "px",
    "min-width": "px",
    "max-width": "px",
    "min-height": "px",
    "max-height": "px",
    "display": None,
    "overflow": None,
    "flex-direction": None,
    "justify-content": None,
    "align-items": None,
    "flex-wrap": None,
    "gap": "px",
    "flex-basis": "%",
    "flex-grow": None,
}
_POSITION_UNITS = {
    "position": None,
    "top": "px",
    "right": "px",
    "bottom": "px",
    "left": "px",
    "z-index": None,
}
_ANIMATION_UNITS = {
    "animation-duration": "s",
    "animation-delay": "s",
    "animation-timing-function": None,
    "animation-iteration-count": None,
    "opacity": None,
    "visibility": None,
}


def node_selector(node_id: str) -> str:
    escaped = str(node_id).replace("\\", "\\\\").replace('"', '\\"')
    return f'[{config.NODE_ID_ATTRIBUTE}="{escaped}"]'


def _copy(attrs: Mapping[str, object], rules: Rules, table: Mapping[str, Optional[str]]) -> None:
    for prop, unit in table.items():
        value = attrs.get(prop)
        if not is_set(value):
            continue
        text = str(value) if unit is None else normalize_unit(value, unit)
        if text:
            rules[prop] = text


def apply_typography(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, _TYPOGRAPHY_UNITS)


def apply_colors(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, dict.fromkeys(_COLOR_PROPS))


def apply_spacing(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, dict.fromkeys(_SPACING_PROPS, "px"))


def apply_border(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, _BORDER_UNITS)


def apply_box_shadow(attrs: Mapping[str, object], rules: Rules) -> None:
    h = attrs.get("box-shadow-h")
    v = attrs.get("box-shadow-v")
    blur = attrs.get("box-shadow-blur")
    if not (is_set(h) or is_set(v) or is_set(blur)):
        return
    spread = attrs.get("box-shadow-spread")
    color = attrs.get("box-shadow-color")
    parts: List[str] = []
    if attrs.get("box-shadow-position") == "inset":
        parts.append("inset")
    for value in (h, v, blur, spread):
        parts.append(normalize_unit(value, "px") if is_set(value) else "0")
    parts.append(str(color) if is_set(color) else config.DEFAULT_SHADOW_COLOR)
    rules["box-shadow"] = " ".join(parts)


def apply_background(attrs: Mapping[str, object], rules: Rules) -> None:
    if attrs.get("background-type") != "image":
        return
    image = attrs.get("background-image")
    if not is_set(image):
        return
    rules["background-image"] = f"url('{image}')"
    _copy(attrs, rules, dict.fromkeys(_BACKGROUND_EXTRAS))


def apply_dimensions(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, _DIMENSION_UNITS)


def apply_position(attrs: Mapping[str, object], rules: Rules) -> None:
    _copy(attrs, rules, _POSITION_UNITS)


def apply_animation(attrs: Mapping[str, object], rules: Rules) -> None:
    name = attrs.get("animation-name")
    if is_set(name) and name != "none":
        rules["animation-name"] = str(name)
    _copy(attrs, rules, _ANIMATION_UNITS)


def responsive_blocks(attrs: Mapping[str, object], node_id: str) -> List[str]:
    selector = node_selector(node_id)
    blocks = []
    for band in BREAKPOINTS:
        if is_truthy_flag(attrs.get(band.attribute)):
            blocks.append(
                f"{band.media_query} {{\n"
                f"  {selector} {{\n"
                f"    display: none !important;\n"
                f"  }}\n"
                f"}}"
            )
    return blocks


def rules_to_css(node_id: str, rules: Rules) -> str:
    if not rules:
        return ""
    body = "\n".join(f"  {prop}: {value};" for prop, value in rules.items())
    return f"{node_selector(node_id)} {{\n{body}\n}}"


STEPS = (
    apply_typography,
    apply_colors,
    apply_spacing,
    apply_border,
    apply_box_shadow,
    apply_background,
    apply_dimensions,
    apply_position,
    apply_animation,
)


def compile_node_css(node_id: str, attributes: Mapping[str, object]) -> str:
    """Generate the full CSS text owned by one node."""
    attrs = {canonical_name(str(key)): value for key, value in attributes.items()}
    rules: Rules = {}
    for step in STEPS:
        step(attrs, rules)
    chunks = [rules_to_css(node_id, rules)]
    chunks.extend(responsive_blocks(attrs, node_id))
    custom = attrs.get("custom-css")
    if is_set(custom):
        chunks.append(str(custom))
    return "\n".join(chunk for chunk in chunks if chunk)


ANIMATION_KEYFRAMES = """\
@keyframes fadeIn { from { opacity: 0; } to { opacity: 1; } }
@keyframes fadeOut { from { opacity: 1; } to { opacity: 0; } }
@keyframes slideInLeft { from { transform: translateX(-100%); opacity: 0; } to { transform: translateX(0); opacity: 1; } }
@keyframes slideInRight { from { transform: translateX(100%); opacity: 0; } to { transform: translateX(0); opacity: 1; } }
@keyframes slideInUp { from { transform: translateY(100%); opacity: 0; } to { transform: translateY(0); opacity: 1; } }
@keyframes slideInDown { from { transform: translateY(-100%); opacity: 0; } to { transform: translateY(0); opacity: 1; } }
@keyframes zoomIn { from { transform: scale(0); opacity: 0; } to { transform: scale(1); opacity: 1; } }
@keyframes zoomOut { from { transform: scale(1); opacity: 1; } to { transform: scale(0); opacity: 0; } }
@keyframes bounce { 0%, 20%, 50%, 80%, 100% { transform: translateY(0); } 40% { transform: translateY(-30px); } 60% { transform: translateY(-15px); } }
@keyframes pulse { 0% { transform: scale(1); } 50% { transform: scale(1.05); } 100% { transform: scale(1); } }
@keyframes shake { 0%, 100% { transform: translateX(0); } 10%, 30%, 50%, 70%, 90% { transform: translateX(-10px); } 20%, 40%, 60%, 80% { transform: translateX(10px); } }
"""
