from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from dscp_types import (
    ALIAS_SEPARATOR,
    PATH_SEPARATOR,
    ModeShape,
    RawTokenValue,
    ResolvedToken,
    ThemeValues,
    TokenCollection,
    TokenDocumentError,
    TokensDocument,
    TokenTier,
    TokenType,
    TokenVariable,
    VariableGroup,
    VariableType,
    parse_tokens_document,
)

from .config import TokenEngineConfig

logger = logging.getLogger(__name__)

_TYPE_MAP: dict[VariableType, TokenType] = {
    "color": "COLOR",
    "number": "FLOAT",
    "string": "STRING",
}
_THEME_MODE_SET = frozenset({"light", "dark"})
_UNCATEGORIZED = "other"
_RESERVED = frozenset({PATH_SEPARATOR, ALIAS_SEPARATOR})


@dataclass(frozen=True)
class ModeLayout:
    """Maps a collection's document mode keys onto token value slots."""

    shape: ModeShape
    slots: tuple[tuple[str, str | None], ...]

    def document_key(self, slot: str | None) -> str | None:
        for document_key, slot_key in self.slots:
            if slot_key == slot:
                return document_key
        return None


def mode_layout(
    collection_name: str,
    modes: Sequence[str],
    *,
    config: TokenEngineConfig | None = None,
) -> ModeLayout:
    config = config or TokenEngineConfig()
    modes = list(modes)
    if modes == [config.single_mode]:
        return ModeLayout(shape="single", slots=((modes[0], None),))

    folded = [mode.casefold() for mode in modes]
    if len(folded) == len(_THEME_MODE_SET) and set(folded) == _THEME_MODE_SET:
        return ModeLayout(
            shape="theme",
            slots=tuple((mode, mode.casefold()) for mode in modes),
        )
    if folded and len(set(folded)) == len(folded) and all(config.is_brand(m) for m in folded):
        return ModeLayout(
            shape="brand",
            slots=tuple((mode, mode.casefold()) for mode in modes),
        )

    raise TokenDocumentError(
        code="unsupported_mode_shape",
        message=f"collection {collection_name!r} has unsupported modes {modes!r}",
        context={"collection": collection_name, "modes": modes},
    )


def _walk_variables(
    group: VariableGroup,
    prefix: tuple[str, ...],
) -> Iterator[tuple[tuple[str, ...], TokenVariable]]:
    for key, node in group.root.items():
        segments = (*prefix, key)
        if isinstance(node, TokenVariable):
            yield segments, node
        else:
            yield from _walk_variables(node, segments)


def _brand_and_category(
    segments: tuple[str, ...],
    tier: TokenTier,
    config: TokenEngineConfig,
) -> tuple[str | None, str]:
    if tier != "global" and config.is_brand(segments[0]):
        category = segments[1] if len(segments) > 1 else _UNCATEGORIZED
        return segments[0].casefold(), category
    return None, segments[0]


def _build_token(
    segments: tuple[str, ...],
    variable: TokenVariable,
    *,
    collection: TokenCollection,
    tier: TokenTier,
    layout: ModeLayout,
    config: TokenEngineConfig,
) -> ResolvedToken:
    path = PATH_SEPARATOR.join(segments)
    if any(not segment or _RESERVED & set(segment) for segment in segments):
        raise TokenDocumentError(
            code="invalid_path",
            message=f"collection {collection.name!r} has an unusable path segment in {path!r}",
            context={"collection": collection.name, "segments": list(segments)},
        )
    brand, category = _brand_and_category(segments, tier, config)

    fields: dict[str, Any] = {
        "id": f"{collection.name}:{path}",
        "path": path,
        "name": segments[-1],
        "tier": tier,
        "type": _TYPE_MAP[variable.type],
        "brand": brand,
        "category": category,
        "collection": collection.name,
        "mode_shape": layout.shape,
    }
    if layout.shape == "single":
        document_key = layout.slots[0][0]
        fields["value"] = variable.values.get(document_key)
    elif layout.shape == "theme":
        theme: dict[str, RawTokenValue | None] = {}
        for document_key, slot in layout.slots:
            theme[str(slot)] = variable.values.get(document_key)
        fields["values"] = ThemeValues(**theme)
    else:
        fields["brand_values"] = {
            str(slot): variable.values[document_key]
            for document_key, slot in layout.slots
            if document_key in variable.values
        }
    return ResolvedToken(**fields)


class TokenParser:
    """Flattens a nested token document into resolved token records."""

    def __init__(
        self,
        document: TokensDocument | Mapping[str, Any] | str | bytes,
        *,
        config: TokenEngineConfig | None = None,
    ) -> None:
        self._document = parse_tokens_document(document)
        self._config = config or TokenEngineConfig()

    @property
    def document(self) -> TokensDocument:
        return self._document

    @property
    def collections(self) -> list[str]:
        return [collection.name for collection in self._document.collections]

    def parse_collection(self, collection: TokenCollection) -> list[ResolvedToken]:
        if ALIAS_SEPARATOR in collection.name:
            raise TokenDocumentError(
                code="invalid_path",
                message=f"collection name {collection.name!r} may not contain {ALIAS_SEPARATOR!r}",
                context={"collection": collection.name},
            )
        tier = self._config.tier_for(collection.name)
        layout = mode_layout(collection.name, collection.modes, config=self._config)
        tokens = [
            _build_token(
                segments,
                variable,
                collection=collection,
                tier=tier,
                layout=layout,
                config=self._config,
            )
            for segments, variable in _walk_variables(collection.variables, ())
        ]
        logger.debug(
            "parsed collection %s: tier=%s shape=%s tokens=%d",
            collection.name,
            tier,
            layout.shape,
            len(tokens),
        )
        return tokens

    def parse_all(self) -> list[ResolvedToken]:
        tokens: list[ResolvedToken] = []
        for collection in self._document.collections:
            tokens.extend(self.parse_collection(collection))
        return tokens

    def parse_by_brand(self, brand: str) -> list[ResolvedToken]:
        brand_key = brand.casefold()
        return [
            token
            for token in self.parse_all()
            if token.tier == "global" or token.brand is None or token.brand == brand_key
        ]


def flatten(
    document: TokensDocument | Mapping[str, Any] | str | bytes,
    *,
    config: TokenEngineConfig | None = None,
) -> list[ResolvedToken]:
    return TokenParser(document, config=config).parse_all()


def flatten_for_brand(
    document: TokensDocument | Mapping[str, Any] | str | bytes,
    brand: str,
    *,
    config: TokenEngineConfig | None = None,
) -> list[ResolvedToken]:
    return TokenParser(document, config=config).parse_by_brand(brand)
