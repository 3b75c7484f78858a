from __future__ import annotations

import pytest
from dscp_types import (
    AliasRef,
    LiteralValue,
    MalformedAlias,
    format_alias,
    is_alias,
    parse_alias,
    parse_token_value,
)


def test_literal_values_pass_through_unchanged() -> None:
    assert parse_token_value("#3b82f6") == LiteralValue(value="#3b82f6")
    assert parse_token_value(4) == LiteralValue(value=4)
    assert parse_token_value(1.5) == LiteralValue(value=1.5)


def test_alias_parses_into_collection_and_path() -> None:
    value = parse_token_value("Global:color/blue/500")

    assert isinstance(value, AliasRef)
    assert value.collection == "Global"
    assert value.path == "color/blue/500"
    assert value.raw == "Global:color/blue/500"
    assert format_alias("Brand", "acpd/color") == "Brand:acpd/color"


@pytest.mark.parametrize(
    "raw",
    [
        "Global:",
        ":color/blue",
        "Global:color:blue",
        "Global:color//blue",
        "Global:/color",
        " Global:color",
    ],
)
def test_malformed_aliases_are_classified_not_raised(raw: str) -> None:
    value = parse_token_value(raw)

    assert isinstance(value, MalformedAlias)
    assert value.raw == raw
    assert value.reason
    assert parse_alias(raw) is None


def test_alias_detection_is_a_separator_check() -> None:
    assert is_alias("Brand:x")
    assert is_alias("not even:close")
    assert not is_alias("#fff")
    assert not is_alias(12)
    assert not is_alias(None)
