import pytest

from sitebuilder.domain.blocks.registry import default_registry
from sitebuilder.domain.exceptions import InvalidBlockType


def test_registry_knows_exactly_the_nine_block_types():
    assert default_registry.type_names == {
        "text", "heading", "image", "quote", "button",
        "video", "spacer", "contact", "columns",
    }
    assert "carousel" not in default_registry


@pytest.mark.parametrize(
    "block_type, expected",
    [
        ("text", {"content": ""}),
        ("heading", {"level": 2, "text": ""}),
        ("image", {"url": "", "alt": "", "caption": ""}),
        ("quote", {"quote": "", "author": ""}),
        ("button", {"text": "Click Here", "url": "", "style": "primary"}),
        ("video", {"url": ""}),
        ("spacer", {"height": 40}),
        ("contact", {"title": "Get in Touch", "subtitle": ""}),
        ("columns", {"column_count": 2, "columns": [{"content": ""}, {"content": ""}]}),
    ],
)
def test_default_payloads(block_type, expected):
    assert default_registry.default_payload(block_type) == expected


def test_default_payload_is_a_fresh_copy():
    first = default_registry.default_payload("columns")
    first["columns"][0]["content"] = "changed"

    assert default_registry.default_payload("columns")["columns"][0]["content"] == ""


def test_unknown_type_is_rejected():
    with pytest.raises(InvalidBlockType):
        default_registry.default_payload("carousel")

    with pytest.raises(InvalidBlockType):
        default_registry.normalize(None, {})


@pytest.mark.parametrize(
    "raw, height",
    [
        ({"height": "9999"}, 500),
        ({"height": "0"}, 40),
        ({"height": "-5"}, 40),
        ({"height": "tall"}, 40),
        ({}, 40),
        ({"height": "120"}, 120),
        ({"height": 1}, 1),
    ],
)
def test_spacer_height_is_clamped(raw, height):
    assert default_registry.normalize("spacer", raw) == {"height": height}


@pytest.mark.parametrize("level, expected", [("3", 3), ("6", 6), ("1", 2), ("9", 2), ("x", 2)])
def test_heading_level_falls_back_to_two(level, expected):
    payload = default_registry.normalize("heading", {"level": level, "text": "Hi"})
    assert payload == {"level": expected, "text": "Hi"}


def test_button_style_defaults_to_primary():
    payload = default_registry.normalize("button", {"text": "Go", "url": "/go", "style": "loud"})
    assert payload == {"text": "Go", "url": "/go", "style": "primary"}

    payload = default_registry.normalize("button", {"style": "secondary"})
    assert payload["style"] == "secondary"


def test_contact_title_defaults_when_blank():
    assert default_registry.normalize("contact", {"title": "", "subtitle": "Say hi"}) == {
        "title": "Get in Touch",
        "subtitle": "Say hi",
    }


def test_image_prefers_selected_library_url():
    payload = default_registry.normalize(
        "image",
        {"url": "/old.png", "selected_image_url": "/uploads/t/new.png", "alt": "A"},
    )
    assert payload == {"url": "/uploads/t/new.png", "alt": "A", "caption": ""}


def test_columns_from_form_fields_are_sized_to_count():
    payload = default_registry.normalize(
        "columns",
        {"column_count": "3", "column_0": "<b>a</b>", "column_1": "b"},
    )
    assert payload == {
        "column_count": 3,
        "columns": [{"content": "<b>a</b>"}, {"content": "b"}, {"content": ""}],
    }


def test_columns_list_is_truncated_and_bad_count_falls_back():
    payload = default_registry.normalize(
        "columns",
        {"column_count": 7, "columns": [{"content": "1"}, {"content": "2"}, {"content": "3"}]},
    )
    assert payload == {"column_count": 2, "columns": [{"content": "1"}, {"content": "2"}]}


def test_normalize_replaces_the_payload_wholesale():
    # Unknown keys are dropped, missing keys come back empty
    assert default_registry.normalize("quote", {"quote": "Q", "extra": "x"}) == {
        "quote": "Q",
        "author": "",
    }
    assert default_registry.normalize("text", None) == {"content": ""}
