"""HTML output for a component tree and page export helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from jinja2 import DictLoader, Environment, select_autoescape
from markupsafe import Markup, escape

from . import config
from .compiler import ANIMATION_KEYFRAMES, node_selector
from .models import Node, NodeKind, PageDocument
from .tree import ComponentTree, column_widths_for
from .units import is_truthy_flag, normalize_unit

logger = logging.getLogger(__name__)

BASE_CSS = """\
.pb-section { display: flex; flex-direction: row; width: 100%; box-sizing: border-box; gap: 10px; }
.pb-column, .pb-inner-column { flex: 1 1 0; min-width: 50px; box-sizing: border-box; }
.pb-inner-section { display: flex; flex-direction: row; width: 100%; gap: 10px; }
.pb-icon-list { list-style: none; padding: 0; margin: 0; }
.pb-icon-list.is-horizontal { display: flex; gap: 1rem; }
.pb-breadcrumbs ol { list-style: none; display: flex; gap: .5rem; padding: 0; }
@media (max-width: 767px) {
  .pb-section, .pb-inner-section { flex-direction: column; }
}
"""

TREE_TEMPLATE = """\
{%- macro widget(item, page_title) -%}
{%- set a = item.attributes -%}
{%- if item.widget == 'heading' -%}
<{{ item.level }} {{ item.attrs }}>{% if a.get('link') %}<a href="{{ a.get('link') }}" target="{{ a.get('target', '_self') }}">{{ a.get('text', 'Heading') }}</a>{% else %}{{ a.get('text', 'Heading') }}{% endif %}</{{ item.level }}>
{%- elif item.widget == 'text' -%}
<div {{ item.attrs }}><p>{{ a.get('text', '') }}</p></div>
{%- elif item.widget == 'button' -%}
<a {{ item.attrs }} href="{{ a.get('link', '#') }}" target="{{ a.get('target', '_self') }}">{{ a.get('text', 'Click me') }}</a>
{%- elif item.widget in ['image', 'site-logo'] -%}
{% if a.get('link') %}<a href="{{ a.get('link') }}" target="{{ a.get('target', '_self') }}">{% endif %}<img {{ item.attrs }} src="{{ a.get('src', '') }}" alt="{{ a.get('alt', '') }}">{% if a.get('link') %}</a>{% endif %}
{%- elif item.widget == 'icon' -%}
<span {{ item.attrs }}>{{ a.get('icon', '★') }}</span>
{%- elif item.widget == 'video' -%}
<video {{ item.attrs }} src="{{ a.get('video-url', '') }}"{% if item.flags['autoplay'] %} autoplay muted{% endif %}{% if item.flags['controls'] %} controls{% endif %}></video>
{%- elif item.widget == 'spacer' -%}
<div {{ item.attrs }} style="height: {{ item.space }}"></div>
{%- elif item.widget == 'divider' -%}
<hr {{ item.attrs }}>
{%- elif item.widget == 'menu-anchor' -%}
<span {{ item.attrs }} id="{{ a.get('anchor-id', '') }}"></span>
{%- elif item.widget == 'blockquote' -%}
<blockquote {{ item.attrs }}><p>{{ a.get('text', '') }}</p>{% if a.get('citation') %}<cite>{{ a.get('citation') }}</cite>{% endif %}</blockquote>
{%- elif item.widget == 'icon-list' -%}
<ul {{ item.attrs }}>{% for line in item.lines %}<li><span class="icon-list-icon">✓</span><span class="icon-list-text">{{ line }}</span></li>{% endfor %}</ul>
{%- elif item.widget == 'breadcrumbs' -%}
<nav {{ item.attrs }} aria-label="Breadcrumb"><ol>{% if item.flags['show-home'] %}<li><a href="/">Home</a></li>{% endif %}<li aria-current="page">{{ page_title }}</li></ol></nav>
{%- elif item.widget == 'countdown' -%}
<div {{ item.attrs }} data-due="{{ a.get('due-date', '') }}" data-expired-text="{{ a.get('expired-text', '') }}"></div>
{%- elif item.widget == 'tabs' -%}
<div {{ item.attrs }} role="tablist">{% for line in item.lines %}<button type="button" role="tab">{{ line }}</button>{% endfor %}</div>
{%- elif item.widget == 'off-canvas' -%}
<div {{ item.attrs }} data-position="{{ a.get('panel-position', 'left') }}"><button type="button">{{ a.get('text', 'Menu') }}</button></div>
{%- elif item.widget == 'form' -%}
<form {{ item.attrs }} action="{{ a.get('form-action', '#') }}" method="post"><button type="submit">{{ a.get('submit-text', 'Send') }}</button></form>
{%- else -%}
<div {{ item.attrs }}>{{ a.get('text', '') }}</div>
{%- endif -%}
{%- endmacro -%}

{%- for item in sections recursive %}
{% if item.widget -%}
{{ widget(item, page_title) }}
{%- else -%}
<{{ item.tag }} {{ item.attrs }}>{{ loop(item.children) }}
</{{ item.tag }}>
{%- endif %}
{%- endfor %}
"""

PAGE_TEMPLATE = """\
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title }}</title>
  {% if stylesheet_path %}<link rel="stylesheet" href="{{ stylesheet_path }}">{% else %}<style>
{{ css | safe }}
  </style>{% endif %}
</head>
<body>
{{ content | safe }}
</body>
</html>
"""

_CONTAINER_TAGS = {
    NodeKind.SECTION: "section",
    NodeKind.COLUMN: "div",
    NodeKind.INNER_SECTION: "div",
    NodeKind.INNER_COLUMN: "div",
}
_HEADING_LEVELS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def _env() -> Environment:
    return Environment(
        loader=DictLoader({"tree.html.j2": TREE_TEMPLATE, "page.html.j2": PAGE_TEMPLATE}),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )


def _html_attrs(node: Node) -> Markup:
    if node.kind is NodeKind.WIDGET:
        classes = ["pb-widget", f"pb-{node.kind_key}"]
        if node.widget_type == "icon-list" and node.attributes.get("list-layout") == "horizontal":
            classes.append("is-horizontal")
    else:
        classes = [f"pb-{node.kind.value}"]
    extra = node.attributes.get("css-classes")
    if extra:
        classes.extend(str(extra).split())
    parts = [
        f'class="{escape(" ".join(classes))}"',
        f'{config.NODE_ID_ATTRIBUTE}="{escape(node.id)}"',
    ]
    css_id = node.attributes.get("css-id")
    if css_id and node.widget_type != "menu-anchor":
        parts.append(f'id="{escape(css_id)}"')
    return Markup(" ".join(parts))


def _context(node: Node) -> Dict[str, object]:
    item: Dict[str, object] = {
        "id": node.id,
        "attrs": _html_attrs(node),
        "attributes": node.attributes,
        "widget": node.widget_type if node.kind is NodeKind.WIDGET else None,
        "tag": _CONTAINER_TAGS.get(node.kind, "div"),
        "children": [],
    }
    if node.kind is NodeKind.WIDGET:
        level = str(node.attributes.get("level", "h2"))
        item["level"] = level if level in _HEADING_LEVELS else "h2"
        text_block = node.attributes.get("items") or node.attributes.get("tab-titles") or ""
        item["lines"] = [line.strip() for line in str(text_block).splitlines() if line.strip()]
        item["flags"] = {
            name: is_truthy_flag(node.attributes.get(name))
            for name in ("autoplay", "controls", "show-home")
        }
        item["space"] = normalize_unit(node.attributes.get("space", 50), "px")
        return item
    item["children"] = [_context(child) for child in node.children]
    return item


def render_tree_html(tree: ComponentTree, page_title: str = "") -> str:
    """HTML markup for every section in ``tree``; each element carries its node id."""
    sections = [_context(section) for section in tree.sections]
    tpl = _env().get_template("tree.html.j2")
    return tpl.render(sections=sections, page_title=page_title).strip()


def column_width_css(sections: Iterable[Node]) -> str:
    """Re-flow width rules for columns without an explicit ``flex-basis``.

    Emitted ahead of the per-node CSS in the page stylesheet.
    """
    blocks: List[str] = []
    stack = list(reversed(list(sections)))
    while stack:
        node = stack.pop()
        if node.kind in (NodeKind.SECTION, NodeKind.INNER_SECTION):
            widths = column_widths_for(node)
            for child in node.children:
                if child.attributes.get("flex-basis") in (None, "", "auto"):
                    blocks.append(f"{node_selector(child.id)} {{\n  flex: 1 1 {widths[child.id]};\n}}")
        stack.extend(reversed(node.children))
    return "\n".join(blocks)


def page_stylesheet(node_css: str, sections: Iterable[Node] = ()) -> str:
    parts = (BASE_CSS, ANIMATION_KEYFRAMES, column_width_css(sections), node_css)
    return "\n".join(part for part in parts if part)


def render_page(document: PageDocument, stylesheet_path: Optional[str] = None) -> str:
    tpl = _env().get_template("page.html.j2")
    return tpl.render(
        title=document.title,
        css=page_stylesheet(document.css, document.sections),
        content=document.html,
        stylesheet_path=stylesheet_path,
    )


def export_page(document: PageDocument, output_dir: str | Path) -> Path:
    """Write ``<slug>.html`` plus ``assets/css/<slug>.css`` into ``output_dir``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    css_dir = output_dir / "assets" / "css"
    css_dir.mkdir(parents=True, exist_ok=True)
    slug = document.slug or "index"
    (css_dir / f"{slug}.css").write_text(page_stylesheet(document.css, document.sections), encoding="utf-8")

    page_path = output_dir / f"{slug}.html"
    html = render_page(document, stylesheet_path=f"assets/css/{slug}.css")
    page_path.write_text(html, encoding="utf-8")
    logger.info("Exported page %s to %s", slug, page_path)
    return page_path
