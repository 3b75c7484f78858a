from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from dscp_types import (
    THEME_MODES,
    AliasRef,
    LiteralValue,
    MalformedAlias,
    RawTokenValue,
    ResolvedToken,
    TokenTier,
    TokenUpdateError,
    TokenValidationError,
    TokenValidationResult,
    TokenValue,
    parse_token_value,
    validation_error_sort_key,
)

from .config import TokenEngineConfig

logger = logging.getLogger(__name__)

ChainStatus = Literal["literal", "absent", "malformed", "missing", "circular"]

_DEFAULT_THEME = "light"


@dataclass(frozen=True)
class ChainOutcome:
    status: ChainStatus
    value: RawTokenValue | None = None


def _mode_label(mode: str | None) -> str:
    return f" in {mode} mode" if mode is not None else ""


class TokenResolver:
    """Alias resolution and validation over one flattened token snapshot.

    Indexes are built once; every query walks the alias graph afresh, so
    repeated calls on the same snapshot return identical results.
    """

    def __init__(
        self,
        tokens: Iterable[ResolvedToken],
        *,
        config: TokenEngineConfig | None = None,
    ) -> None:
        self._config = config or TokenEngineConfig()
        self._tokens: list[ResolvedToken] = list(tokens)
        self._by_path: dict[str, ResolvedToken] = {}
        self._by_collection: dict[str, dict[str, ResolvedToken]] = {}
        self._slots: dict[str, dict[str | None, TokenValue]] = {}

        for token in self._tokens:
            existing = self._by_path.get(token.path)
            if existing is not None and existing.id != token.id:
                logger.warning(
                    "path %s is defined by %s and %s; path lookups use %s",
                    token.path,
                    existing.id,
                    token.id,
                    token.id,
                )
            self._by_path[token.path] = token
            self._by_collection.setdefault(token.collection, {})[token.path] = token

            slots: dict[str | None, TokenValue] = {}
            for mode in token.slot_modes():
                raw = token.raw_value(mode)
                if raw is not None:
                    slots[mode] = parse_token_value(raw)
            self._slots[token.id] = slots

        logger.debug(
            "indexed %d tokens across %d collections",
            len(self._tokens),
            len(self._by_collection),
        )

    @property
    def config(self) -> TokenEngineConfig:
        return self._config

    def get(self, path: str) -> ResolvedToken | None:
        return self._by_path.get(path)

    def all(self) -> list[ResolvedToken]:
        return list(self._tokens)

    def by_category(self, category: str) -> list[ResolvedToken]:
        return [token for token in self._tokens if token.category == category]

    def by_tier(self, tier: TokenTier) -> list[ResolvedToken]:
        return [token for token in self._tokens if token.tier == tier]

    def by_collection(self, collection: str) -> list[ResolvedToken]:
        return list(self._by_collection.get(collection, {}).values())

    def search(self, query: str) -> list[ResolvedToken]:
        needle = query.casefold()
        return [
            token
            for token in self._tokens
            if needle in token.path.casefold() or needle in token.name.casefold()
        ]

    def with_token(self, token: ResolvedToken) -> "TokenResolver":
        tokens = [token if existing.id == token.id else existing for existing in self._tokens]
        if all(existing.id != token.id for existing in self._tokens):
            tokens.append(token)
        return TokenResolver(tokens, config=self._config)

    def _lookup(self, alias: AliasRef) -> ResolvedToken | None:
        return self._by_collection.get(alias.collection, {}).get(alias.path)

    def _brand_key(self, token: ResolvedToken, mode: str, brand: str | None) -> str | None:
        if brand is not None:
            return brand.casefold()
        if self._config.is_brand(mode):
            return mode.casefold()
        return token.brand

    def _slot_value(
        self,
        token: ResolvedToken,
        mode: str,
        brand: str | None,
    ) -> TokenValue | None:
        slots = self._slots.get(token.id, {})
        if token.mode_shape == "single":
            return slots.get(None)
        if token.mode_shape == "theme":
            return slots.get(mode.casefold()) if mode.casefold() in THEME_MODES else None
        brand_key = self._brand_key(token, mode, brand)
        return slots.get(brand_key) if brand_key is not None else None

    def follow(
        self,
        token: ResolvedToken,
        mode: str = _DEFAULT_THEME,
        *,
        brand: str | None = None,
    ) -> ChainOutcome:
        """Walk the alias chain from ``token`` under one mode until it terminates."""
        visited: set[str] = set()
        current = token
        while current.id not in visited:
            visited.add(current.id)
            value = self._slot_value(current, mode, brand)
            if value is None:
                return ChainOutcome(status="absent")
            if isinstance(value, LiteralValue):
                return ChainOutcome(status="literal", value=value.value)
            if isinstance(value, MalformedAlias):
                return ChainOutcome(status="malformed")
            target = self._lookup(value)
            if target is None:
                return ChainOutcome(status="missing")
            current = target
        return ChainOutcome(status="circular")

    def resolve(
        self,
        path: str,
        mode: str = _DEFAULT_THEME,
        *,
        brand: str | None = None,
    ) -> RawTokenValue | None:
        token = self._by_path.get(path)
        if token is None:
            return None
        return self.follow(token, mode, brand=brand).value

    def resolve_all(
        self,
        brand: str,
        mode: str = _DEFAULT_THEME,
    ) -> dict[str, RawTokenValue | None]:
        brand_key = brand.casefold()
        resolved: dict[str, RawTokenValue | None] = {}
        for path, token in self._by_path.items():
            in_scope = (
                token.tier == "global"
                or token.brand == brand_key
                or (token.mode_shape == "brand" and brand_key in (token.brand_values or {}))
            )
            if in_scope:
                resolved[path] = self.follow(token, mode, brand=brand_key).value
        return resolved

    def _is_circular(self, token: ResolvedToken, slot: str | None) -> bool:
        if token.mode_shape == "single":
            return self.follow(token).status == "circular"
        if token.mode_shape == "theme":
            return self.follow(token, str(slot)).status == "circular"
        return any(
            self.follow(token, theme, brand=slot).status == "circular" for theme in THEME_MODES
        )

    def _validate_slot(self, token: ResolvedToken, slot: str | None) -> list[TokenValidationError]:
        value = self._slots.get(token.id, {}).get(slot)
        if value is None or isinstance(value, LiteralValue):
            return []

        errors: list[TokenValidationError] = []
        if isinstance(value, MalformedAlias):
            errors.append(
                TokenValidationError(
                    path=token.path,
                    collection=token.collection,
                    mode=slot,
                    type="invalid_value",
                    reference=value.raw,
                    message=f"Invalid alias format: {value.raw} ({value.reason})",
                )
            )
            return errors

        if self._lookup(value) is None:
            errors.append(
                TokenValidationError(
                    path=token.path,
                    collection=token.collection,
                    mode=slot,
                    type="missing_reference",
                    reference=value.raw,
                    message=f"Missing reference: {value.raw}{_mode_label(slot)}",
                )
            )
        elif self._is_circular(token, slot):
            errors.append(
                TokenValidationError(
                    path=token.path,
                    collection=token.collection,
                    mode=slot,
                    type="circular_reference",
                    reference=value.raw,
                    message=f"Circular reference detected{_mode_label(slot) or ' in default mode'}",
                )
            )
        return errors

    def validate(self) -> TokenValidationResult:
        errors: list[TokenValidationError] = []
        for token in self._tokens:
            for slot in token.slot_modes():
                errors.extend(self._validate_slot(token, slot))

        errors.sort(key=validation_error_sort_key)
        logger.debug("validated %d tokens: %d errors", len(self._tokens), len(errors))
        return TokenValidationResult(valid=not errors, errors=errors)

    def update(
        self,
        path: str,
        value: RawTokenValue,
        mode: str | None = None,
    ) -> ResolvedToken | None:
        """Return a copy of the token at ``path`` with one slot overwritten.

        Single-mode tokens ignore ``mode``. Theme and brand tokens require an
        explicit mode naming one of their slots. The resolver is not mutated.
        """
        token = self._by_path.get(path)
        if token is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise TokenUpdateError(
                code="invalid_value",
                message=f"token values must be strings or numbers, got {type(value).__name__}",
                context={"path": path},
            )

        if token.mode_shape == "single":
            return token.model_copy(update={"value": value})

        if mode is None:
            raise TokenUpdateError(
                code="mode_required",
                message=f"updating {path!r} requires an explicit mode",
                context={"path": path, "mode_shape": token.mode_shape},
            )
        mode_key = mode.casefold()

        if token.mode_shape == "theme" and token.values is not None:
            if mode_key not in THEME_MODES:
                raise TokenUpdateError(
                    code="invalid_mode",
                    message=f"mode {mode!r} is not a theme mode of {path!r}",
                    context={"path": path, "mode": mode},
                )
            return token.model_copy(
                update={"values": token.values.model_copy(update={mode_key: value})}
            )

        if not self._config.is_brand(mode_key):
            raise TokenUpdateError(
                code="invalid_mode",
                message=f"mode {mode!r} is not a brand mode of {path!r}",
                context={"path": path, "mode": mode},
            )
        brand_values = dict(token.brand_values or {})
        brand_values[mode_key] = value
        return token.model_copy(update={"brand_values": brand_values})
