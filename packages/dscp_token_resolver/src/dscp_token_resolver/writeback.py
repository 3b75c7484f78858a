from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from dscp_types import (
    PATH_SEPARATOR,
    RawTokenValue,
    ResolvedToken,
    TokenUpdateError,
    TokenValidationError,
    TokenValidationResult,
    TokenWriteBackError,
)

from .config import TokenEngineConfig
from .parser import flatten, mode_layout
from .resolver import TokenResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedTokenUpdate:
    token: ResolvedToken
    commit_message: str
    validation: TokenValidationResult


def update_commit_message(path: str, value: RawTokenValue, mode: str | None = None) -> str:
    mode_part = f" ({mode})" if mode else ""
    return f"Update {path}{mode_part} to {value}"


def _error_key(error: TokenValidationError) -> tuple[str, str]:
    return (error.path, error.type)


def find_new_validation_errors(
    before: TokenValidationResult,
    after: TokenValidationResult,
) -> list[TokenValidationError]:
    """Errors in ``after`` whose (path, type) pair was not already reported in ``before``."""
    known = {_error_key(error) for error in before.errors}
    return [error for error in after.errors if _error_key(error) not in known]


def _find_collection(
    document_payload: Mapping[str, Any],
    name: str,
) -> MutableMapping[str, Any]:
    collections = document_payload.get("collections")
    if not isinstance(collections, list):
        raise TokenWriteBackError(
            code="collections_missing",
            message="token document has no collections list",
        )
    for collection in collections:
        if isinstance(collection, MutableMapping) and collection.get("name") == name:
            return collection
    raise TokenWriteBackError(
        code="collection_missing",
        message=f"collection {name!r} not found in token document",
        context={"collection": name},
    )


def _find_variable_values(
    collection: Mapping[str, Any],
    token: ResolvedToken,
) -> MutableMapping[str, Any]:
    current: Any = collection.get("variables")
    for segment in token.path.split(PATH_SEPARATOR):
        if not isinstance(current, Mapping) or segment not in current:
            raise TokenWriteBackError(
                code="path_missing",
                message=f"path segment {segment!r} not found in collection {token.collection!r}",
                context={"collection": token.collection, "path": token.path},
            )
        current = current[segment]

    values = current.get("values") if isinstance(current, Mapping) else None
    if not isinstance(values, MutableMapping):
        raise TokenWriteBackError(
            code="variable_missing",
            message=f"{token.id} is not a variable with a values mapping",
            context={"collection": token.collection, "path": token.path},
        )
    return values


def apply_token_update(
    document_payload: MutableMapping[str, Any],
    token: ResolvedToken,
    mode: str | None = None,
    *,
    config: TokenEngineConfig | None = None,
) -> str:
    """Write one slot of ``token`` back into the caller's raw document.

    Returns the document mode key that was written. Single-mode tokens ignore
    ``mode``; other shapes require the slot to be named.
    """
    collection = _find_collection(document_payload, token.collection)
    layout = mode_layout(token.collection, list(collection.get("modes") or []), config=config)
    if layout.shape != token.mode_shape:
        raise TokenWriteBackError(
            code="mode_shape_mismatch",
            message=(
                f"collection {token.collection!r} has shape {layout.shape!r} "
                f"but the token has {token.mode_shape!r}"
            ),
            context={"collection": token.collection, "path": token.path},
        )

    slot = None if token.mode_shape == "single" else (mode or "").casefold() or None
    if token.mode_shape != "single" and slot is None:
        raise TokenWriteBackError(
            code="mode_required",
            message=f"writing {token.id} back requires an explicit mode",
            context={"collection": token.collection, "path": token.path},
        )
    document_key = layout.document_key(slot)
    if document_key is None:
        raise TokenWriteBackError(
            code="mode_missing",
            message=f"collection {token.collection!r} has no mode for {mode!r}",
            context={"collection": token.collection, "mode": mode},
        )

    values = _find_variable_values(collection, token)
    raw = token.raw_value(slot)
    if raw is None:
        values.pop(document_key, None)
    else:
        values[document_key] = raw
    logger.debug("wrote %s[%s] back into document", token.id, document_key)
    return document_key


def stage_token_update(
    document_payload: MutableMapping[str, Any],
    path: str,
    value: RawTokenValue,
    mode: str | None = None,
    *,
    baseline: TokenValidationResult | None = None,
    config: TokenEngineConfig | None = None,
) -> StagedTokenUpdate:
    """Update one token, refuse newly introduced validation errors, then write it back.

    ``baseline`` defaults to the document's own validation before the update;
    pre-existing errors do not block. The document is only mutated once the
    update validates.
    """
    resolver = TokenResolver(flatten(document_payload, config=config), config=config)
    updated = resolver.update(path, value, mode)
    if updated is None:
        raise TokenUpdateError(
            code="token_not_found",
            message=f"token {path!r} not found",
            context={"path": path},
        )

    before = baseline if baseline is not None else resolver.validate()
    after = resolver.with_token(updated).validate()
    new_errors = find_new_validation_errors(before, after)
    if new_errors:
        raise TokenUpdateError(
            code="validation_failed",
            message=f"update to {path!r} introduces {len(new_errors)} validation error(s)",
            context={"errors": [error.model_dump(mode="json") for error in new_errors]},
        )
    if after.errors:
        logger.warning(
            "pre-existing validation issues (not blocking): %d",
            len(after.errors),
        )

    apply_token_update(document_payload, updated, mode, config=config)
    return StagedTokenUpdate(
        token=updated,
        commit_message=update_commit_message(path, value, mode),
        validation=after,
    )
