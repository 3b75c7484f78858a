from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    Tag,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import TokenDocumentError
from .values import RawTokenValue

VariableType = Literal["color", "number", "string"]


class TokenVariable(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: VariableType
    values: dict[str, RawTokenValue] = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


def _node_tag(value: Any) -> str | None:
    if isinstance(value, TokenVariable):
        return "leaf"
    if isinstance(value, VariableGroup):
        return "branch"
    if isinstance(value, Mapping):
        if isinstance(value.get("type"), str) and isinstance(value.get("values"), Mapping):
            return "leaf"
        return "branch"
    return None


class VariableGroup(RootModel):
    root: dict[str, VariableNode] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _drop_metadata_entries(cls, data: Any) -> Any:
        # scalar entries (descriptions, export metadata) are not path segments
        if isinstance(data, Mapping):
            return {
                key: value
                for key, value in data.items()
                if isinstance(value, (Mapping, TokenVariable, VariableGroup))
            }
        return data


VariableNode = Annotated[
    Union[
        Annotated[TokenVariable, Tag("leaf")],
        Annotated[VariableGroup, Tag("branch")],
    ],
    Discriminator(_node_tag),
]

VariableGroup.model_rebuild()


class TokenCollection(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    modes: list[str] = Field(min_length=1)
    variables: VariableGroup = Field(default_factory=VariableGroup)

    @model_validator(mode="after")
    def _validate_modes(self) -> "TokenCollection":
        if len(set(self.modes)) != len(self.modes):
            raise ValueError(f"collection {self.name!r} declares duplicate modes")
        if any(not mode for mode in self.modes):
            raise ValueError(f"collection {self.name!r} declares an empty mode name")
        return self


class TokensDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    collections: list[TokenCollection] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_unique_collections(self) -> "TokensDocument":
        seen: set[str] = set()
        for collection in self.collections:
            if collection.name in seen:
                raise ValueError(f"duplicate collection name: {collection.name}")
            seen.add(collection.name)
        return self

    def collection(self, name: str) -> TokenCollection | None:
        for collection in self.collections:
            if collection.name == name:
                return collection
        return None


def _error_path(loc: Any) -> str:
    if isinstance(loc, (list, tuple)) and loc:
        return "/" + "/".join(str(part) for part in loc)
    return "/"


def parse_tokens_document(
    payload: TokensDocument | Mapping[str, Any] | str | bytes,
) -> TokensDocument:
    if isinstance(payload, TokensDocument):
        return payload

    raw: Any
    if isinstance(payload, (str, bytes)):
        try:
            raw = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise TokenDocumentError(
                code="invalid_json",
                message=f"token document is not valid JSON: {exc.msg}",
                context={"line": exc.lineno, "column": exc.colno},
            ) from exc
        except UnicodeDecodeError as exc:
            raise TokenDocumentError(
                code="invalid_json",
                message=f"token document is not valid {exc.encoding}: {exc.reason}",
                context={"position": exc.start},
            ) from exc
    else:
        raw = payload

    try:
        return TokensDocument.model_validate(raw)
    except ValidationError as exc:
        errors = exc.errors()
        chosen = errors[0] if errors else None
        json_path = _error_path(chosen.get("loc", ())) if chosen is not None else "/"
        message = chosen.get("msg", str(exc)) if chosen is not None else str(exc)
        raise TokenDocumentError(
            code="schema_invalid",
            message=f"{json_path}: {message}",
            context={"json_path": json_path, "error_count": len(errors)},
        ) from exc
