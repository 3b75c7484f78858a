from __future__ import annotations

import pytest
from dscp_token_resolver import TokenEngineConfig


def test_defaults_describe_the_two_brand_layout() -> None:
    config = TokenEngineConfig()

    assert config.brands == ("acpd", "eeaa")
    assert config.is_brand("ACPD")
    assert not config.is_brand("light")
    assert not config.is_brand(None)
    assert config.tier_for("GLOBAL") == "global"
    assert config.tier_for("brand") == "brand"
    assert config.tier_for("Button") == "component"


def test_from_env_without_overrides_matches_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DSCP_TOKEN_BRANDS",
        "DSCP_GLOBAL_COLLECTION",
        "DSCP_BRAND_COLLECTION",
        "DSCP_DEFAULT_MODE",
    ):
        monkeypatch.delenv(name, raising=False)

    assert TokenEngineConfig.from_env() == TokenEngineConfig()


def test_from_env_reads_brand_codes_and_collection_names(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("DSCP_TOKEN_BRANDS", " ACPD, zeta ,,acpd")
    monkeypatch.setenv("DSCP_GLOBAL_COLLECTION", "Primitives")
    monkeypatch.setenv("DSCP_BRAND_COLLECTION", "  ")
    monkeypatch.setenv("DSCP_DEFAULT_MODE", "Value")

    config = TokenEngineConfig.from_env()

    assert config.brands == ("acpd", "zeta")
    assert config.global_collection == "Primitives"
    assert config.brand_collection == "Brand"
    assert config.single_mode == "Value"
    assert config.tier_for("primitives") == "global"


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("acpd,not a code", "invalid brand code"),
        (" , ,", "at least one brand code"),
    ],
)
def test_from_env_rejects_unusable_brand_lists(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    message: str,
) -> None:
    monkeypatch.setenv("DSCP_TOKEN_BRANDS", raw)

    with pytest.raises(RuntimeError, match=message):
        TokenEngineConfig.from_env()
