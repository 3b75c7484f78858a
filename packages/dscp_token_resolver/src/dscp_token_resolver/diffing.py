from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from dscp_types import (
    THEME_MODES,
    RawTokenValue,
    ResolvedToken,
    TokenChange,
    TokenChangeKind,
    TokenDiffReport,
    TokensDocument,
)

from .config import TokenEngineConfig
from .parser import flatten
from .resolver import TokenResolver

logger = logging.getLogger(__name__)

_DISPLAY_THEME = "light"


def _resolved(resolver: TokenResolver, path: str, mode: str | None) -> RawTokenValue | None:
    if mode is None:
        return resolver.resolve(path)
    if mode in THEME_MODES:
        return resolver.resolve(path, mode)
    # brand slots are previewed under the default display theme
    return resolver.resolve(path, _DISPLAY_THEME, brand=mode)


def _union_modes(base: ResolvedToken, head: ResolvedToken) -> list[str | None]:
    modes: list[str | None] = []
    for mode in (*base.slot_modes(), *head.slot_modes()):
        if mode not in modes:
            modes.append(mode)
    return modes


def _presence_changes(
    kind: TokenChangeKind,
    token: ResolvedToken,
    resolver: TokenResolver,
) -> list[TokenChange]:
    modes = [mode for mode in token.slot_modes() if token.raw_value(mode) is not None] or [None]
    changes: list[TokenChange] = []
    for mode in modes:
        raw = token.raw_value(mode)
        resolved = _resolved(resolver, token.path, mode)
        changes.append(
            TokenChange(
                kind=kind,
                path=token.path,
                collection=token.collection,
                category=token.category,
                type=token.type,
                mode=mode,
                old_value=raw if kind == "removed" else None,
                new_value=raw if kind == "added" else None,
                old_resolved=resolved if kind == "removed" else None,
                new_resolved=resolved if kind == "added" else None,
            )
        )
    return changes


def _value_changes(
    base: ResolvedToken,
    head: ResolvedToken,
    base_resolver: TokenResolver,
    head_resolver: TokenResolver,
) -> list[TokenChange]:
    changes: list[TokenChange] = []
    for mode in _union_modes(base, head):
        old_value = base.raw_value(mode)
        new_value = head.raw_value(mode)
        if old_value == new_value:
            continue
        changes.append(
            TokenChange(
                kind="changed",
                path=head.path,
                collection=head.collection,
                category=head.category,
                type=head.type,
                mode=mode,
                old_value=old_value,
                new_value=new_value,
                old_resolved=_resolved(base_resolver, base.path, mode),
                new_resolved=_resolved(head_resolver, head.path, mode),
            )
        )
    return changes


def diff_tokens(
    base_tokens: Iterable[ResolvedToken],
    head_tokens: Iterable[ResolvedToken],
    base_resolver: TokenResolver | None = None,
    head_resolver: TokenResolver | None = None,
    *,
    config: TokenEngineConfig | None = None,
) -> list[TokenChange]:
    """Token-level changes from ``base`` to ``head``, keyed by token path.

    Only modes whose raw value differs produce an entry; resolved values are
    attached for visual diffing.
    """
    base_list = list(base_tokens)
    head_list = list(head_tokens)
    if base_resolver is None:
        base_resolver = TokenResolver(base_list, config=config)
    if head_resolver is None:
        head_resolver = TokenResolver(head_list, config=config)

    base_by_path = {token.path: token for token in base_list}
    head_by_path = {token.path: token for token in head_list}

    changes: list[TokenChange] = []
    for path in sorted(base_by_path.keys() | head_by_path.keys()):
        base_token = base_by_path.get(path)
        head_token = head_by_path.get(path)
        if base_token is None and head_token is not None:
            changes.extend(_presence_changes("added", head_token, head_resolver))
        elif head_token is None and base_token is not None:
            changes.extend(_presence_changes("removed", base_token, base_resolver))
        elif base_token is not None and head_token is not None:
            changes.extend(_value_changes(base_token, head_token, base_resolver, head_resolver))

    logger.debug(
        "diffed %d base tokens against %d head tokens: %d changes",
        len(base_list),
        len(head_list),
        len(changes),
    )
    return changes


def build_token_diff_report(
    base: TokensDocument | Mapping[str, Any] | str | bytes,
    head: TokensDocument | Mapping[str, Any] | str | bytes,
    *,
    config: TokenEngineConfig | None = None,
) -> TokenDiffReport:
    changes = diff_tokens(flatten(base, config=config), flatten(head, config=config), config=config)

    counts: dict[TokenChangeKind, int] = {"added": 0, "removed": 0, "changed": 0}
    categories: dict[str, int] = {}
    for change in changes:
        counts[change.kind] += 1
        categories[change.category] = categories.get(change.category, 0) + 1

    return TokenDiffReport.model_validate(
        {
            "summary": {
                "total_changes": len(changes),
                "added": counts["added"],
                "removed": counts["removed"],
                "changed": counts["changed"],
            },
            "categories": dict(sorted(categories.items())),
            "changes": [change.model_dump(mode="json") for change in changes],
        }
    )
