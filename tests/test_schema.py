from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pagebuilder.core.schema import (
    DEFAULT_SECTION,
    DEFAULT_TAB,
    PROPERTIES,
    TABS,
    canonical_name,
    describe,
    format_section_title,
    properties_for,
    validate_value,
)


def test_every_property_has_exactly_one_tab_and_section() -> None:
    for name, descriptor in PROPERTIES.items():
        assert descriptor.name == name
        assert descriptor.tab in TABS
        assert descriptor.section


def test_canonical_name_accepts_camel_and_snake_case() -> None:
    assert canonical_name("paddingTop") == "padding-top"
    assert canonical_name("padding_top") == "padding-top"
    assert canonical_name("padding-top") == "padding-top"
    assert canonical_name("boxShadowH") == "box-shadow-h"
    assert canonical_name("hideMobile") == "hide-mobile"
    assert canonical_name("zIndex") == "z-index"


def test_describe_known_properties() -> None:
    padding = describe("paddingTop")
    assert padding.tab == "style"
    assert padding.section == "spacing"
    assert padding.default_unit == "px"

    hide = describe("hide-mobile")
    assert hide.tab == "advanced"
    assert hide.section == "responsive"


def test_describe_unknown_property_falls_back_to_defaults() -> None:
    descriptor = describe("someMadeUpThing")
    assert descriptor.name == "some-made-up-thing"
    assert descriptor.tab == DEFAULT_TAB
    assert descriptor.section == DEFAULT_SECTION


def test_properties_for_columns_include_sizing() -> None:
    names = properties_for("column")
    assert "flex-basis" in names
    assert "flex-grow" in names
    assert "text" not in names


def test_properties_for_widgets_and_unknown_types() -> None:
    heading = properties_for("heading")
    assert heading[:2] == ["text", "level"]
    assert "font-size" in heading
    assert "flex-basis" not in heading
    assert properties_for("not-a-widget") == properties_for("widget")


def test_applies_to_tracks_trait_sets() -> None:
    assert describe("flex-basis").applies("column")
    assert not describe("flex-basis").applies("heading")


def test_validate_value_checks_shape() -> None:
    assert validate_value("padding-top", 10).ok
    assert validate_value("padding-top", None).ok
    assert not validate_value("padding-top", [1, 2]).ok
    assert validate_value("hide-mobile", True).ok
    assert validate_value("hide-mobile", "off").ok
    assert not validate_value("hide-mobile", "sometimes").ok
    assert validate_value("text-align", "center").ok
    assert not validate_value("text-align", "middle").ok


def test_format_section_title() -> None:
    assert format_section_title("box-shadow") == "Box Shadow"
    assert format_section_title("typography") == "Typography"
    assert format_section_title("fontSize") == "Font Size"
    assert format_section_title("custom_css") == "Custom Css"
