from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# booleans are not token values
RawTokenValue = Union[StrictStr, StrictInt, StrictFloat]

ALIAS_SEPARATOR = ":"
PATH_SEPARATOR = "/"


class LiteralValue(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["literal"] = "literal"
    value: RawTokenValue


class AliasRef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["alias"] = "alias"
    collection: str
    path: str

    @property
    def raw(self) -> str:
        return format_alias(self.collection, self.path)


class MalformedAlias(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["malformed"] = "malformed"
    raw: str
    reason: str


TokenValue = Annotated[LiteralValue | AliasRef | MalformedAlias, Field(discriminator="kind")]


def format_alias(collection: str, path: str) -> str:
    return f"{collection}{ALIAS_SEPARATOR}{path}"


def is_alias(value: RawTokenValue | None) -> bool:
    """A value is an alias candidate purely by containing the separator."""
    return isinstance(value, str) and ALIAS_SEPARATOR in value


def _malformed_reason(collection: str, path: str) -> str | None:
    if ALIAS_SEPARATOR in path:
        return "alias contains more than one separator"
    if not collection or not path:
        return "alias needs both a collection and a path"
    if collection != collection.strip() or path != path.strip():
        return "alias may not carry surrounding whitespace"
    if any(not segment for segment in path.split(PATH_SEPARATOR)):
        return "alias path may not contain empty segments"
    return None


def parse_alias(value: str) -> AliasRef | None:
    if not is_alias(value):
        return None
    collection, _, path = value.partition(ALIAS_SEPARATOR)
    if _malformed_reason(collection, path) is not None:
        return None
    return AliasRef(collection=collection, path=path)


def parse_token_value(value: RawTokenValue) -> LiteralValue | AliasRef | MalformedAlias:
    if not is_alias(value):
        return LiteralValue(value=value)
    collection, _, path = value.partition(ALIAS_SEPARATOR)
    reason = _malformed_reason(collection, path)
    if reason is not None:
        return MalformedAlias(raw=value, reason=reason)
    return AliasRef(collection=collection, path=path)
