from __future__ import annotations

import copy

from dscp_token_resolver import TokenResolver, build_token_diff_report, diff_tokens, flatten


def _tokens_payload() -> dict:
    return {
        "collections": [
            {
                "name": "Global",
                "modes": ["Default"],
                "variables": {
                    "color": {
                        "blue": {"500": {"type": "color", "values": {"Default": "#3b82f6"}}},
                        "black": {"type": "color", "values": {"Default": "#000000"}},
                    },
                },
            },
            {
                "name": "Brand",
                "modes": ["Light", "Dark"],
                "variables": {
                    "btn": {"type": "color", "values": {"Light": "#111", "Dark": "#000"}},
                    "acpd": {
                        "color": {
                            "primary": {
                                "type": "color",
                                "values": {
                                    "Light": "Global:color/blue/500",
                                    "Dark": "Global:color/black",
                                },
                            },
                        },
                    },
                },
            },
            {
                "name": "Button",
                "modes": ["ACPD", "EEAA"],
                "variables": {
                    "button": {
                        "background": {
                            "type": "color",
                            "values": {"ACPD": "Brand:acpd/color/primary", "EEAA": "#ffffff"},
                        },
                    },
                },
            },
        ],
    }


def _diff(base: dict, head: dict):
    return diff_tokens(flatten(base), flatten(head))


def test_only_modes_with_differing_raw_values_are_reported() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][1]["variables"]["btn"]["values"]["Light"] = "#222"

    changes = _diff(base, head)

    assert len(changes) == 1
    change = changes[0]
    assert change.kind == "changed"
    assert change.path == "btn"
    assert change.collection == "Brand"
    assert change.category == "btn"
    assert change.type == "COLOR"
    assert change.mode == "light"
    assert (change.old_value, change.new_value) == ("#111", "#222")
    assert (change.old_resolved, change.new_resolved) == ("#111", "#222")


def test_identical_snapshots_have_no_changes() -> None:
    assert _diff(_tokens_payload(), _tokens_payload()) == []


def test_upstream_literal_change_does_not_flag_aliasing_tokens() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][0]["variables"]["color"]["blue"]["500"]["values"]["Default"] = "#2563eb"

    changes = _diff(base, head)

    assert [(change.path, change.mode) for change in changes] == [("color/blue/500", None)]
    assert changes[0].new_resolved == "#2563eb"


def test_retargeted_alias_carries_both_resolved_values() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][1]["variables"]["acpd"]["color"]["primary"]["values"][
        "Light"
    ] = "Global:color/black"

    changes = _diff(base, head)

    assert len(changes) == 1
    assert changes[0].old_value == "Global:color/blue/500"
    assert changes[0].new_value == "Global:color/black"
    assert changes[0].old_resolved == "#3b82f6"
    assert changes[0].new_resolved == "#000000"


def test_brand_slot_changes_resolve_under_the_light_theme() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][2]["variables"]["button"]["background"]["values"]["EEAA"] = "#eeeeee"
    head["collections"][2]["variables"]["button"]["background"]["values"]["ACPD"] = "#abcdef"

    changes = _diff(base, head)

    assert [(change.mode, change.old_resolved, change.new_resolved) for change in changes] == [
        ("acpd", "#3b82f6", "#abcdef"),
        ("eeaa", "#ffffff", "#eeeeee"),
    ]


def test_additions_and_removals_are_symmetric() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][1]["variables"]["card"] = {
        "type": "color",
        "values": {"Light": "Global:color/black"},
    }
    del head["collections"][0]["variables"]["color"]["black"]
    head["collections"][1]["variables"]["acpd"]["color"]["primary"]["values"][
        "Dark"
    ] = "#010101"

    forward = _diff(base, head)
    backward = _diff(head, base)

    assert [(c.kind, c.path, c.mode) for c in forward] == [
        ("changed", "acpd/color/primary", "dark"),
        ("added", "card", "light"),
        ("removed", "color/black", None),
    ]
    added = [c for c in forward if c.kind == "added"]
    removed_back = [c for c in backward if c.kind == "removed"]
    assert [(c.path, c.mode, c.new_value) for c in added] == [
        (c.path, c.mode, c.old_value) for c in removed_back
    ]
    removed = [c for c in forward if c.kind == "removed"]
    added_back = [c for c in backward if c.kind == "added"]
    assert [(c.path, c.mode, c.old_value) for c in removed] == [
        (c.path, c.mode, c.new_value) for c in added_back
    ]
    # the added token's alias target no longer exists in head
    assert added[0].new_resolved is None
    assert removed[0].old_resolved == "#000000"


def test_explicit_resolvers_are_used_for_resolved_values() -> None:
    base_tokens = flatten(_tokens_payload())
    head_payload = _tokens_payload()
    head_payload["collections"][1]["variables"]["btn"]["values"]["Dark"] = "Global:color/black"
    head_tokens = flatten(head_payload)

    changes = diff_tokens(
        base_tokens,
        head_tokens,
        TokenResolver(base_tokens),
        TokenResolver(head_tokens),
    )

    assert [(c.mode, c.new_resolved) for c in changes] == [("dark", "#000000")]


def test_diff_report_summarizes_changes_by_kind_and_category() -> None:
    base = _tokens_payload()
    head = copy.deepcopy(base)
    head["collections"][1]["variables"]["btn"]["values"]["Light"] = "#222"
    head["collections"][1]["variables"]["btn"]["values"]["Dark"] = "#333"
    del head["collections"][0]["variables"]["color"]["black"]
    head["collections"][1]["variables"]["acpd"]["color"]["primary"]["values"][
        "Dark"
    ] = "#010101"

    report = build_token_diff_report(base, head)

    assert report.summary.model_dump() == {
        "total_changes": 4,
        "added": 0,
        "removed": 1,
        "changed": 3,
    }
    assert report.categories == {"btn": 2, "color": 2}
    assert list(report.categories) == ["btn", "color"]
    dumped = report.model_dump(mode="json", by_alias=True)
    assert dumped["changes"][0]["path"] == "acpd/color/primary"
    assert dumped["changes"][0]["oldValue"] == "Global:color/black"
    assert dumped["changes"][0]["newValue"] == "#010101"
    assert dumped["changes"][-1]["kind"] == "removed"
