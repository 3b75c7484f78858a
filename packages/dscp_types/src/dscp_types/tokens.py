from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .values import PATH_SEPARATOR, RawTokenValue

TokenTier = Literal["global", "brand", "component"]
TokenType = Literal["COLOR", "FLOAT", "STRING"]
TokenMode = Literal["light", "dark"]
ModeShape = Literal["single", "theme", "brand"]
TokenValidationErrorType = Literal[
    "circular_reference",
    "missing_reference",
    "type_mismatch",
    "invalid_value",
]

THEME_MODES: tuple[TokenMode, ...] = ("light", "dark")


class ThemeValues(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    light: RawTokenValue | None = None
    dark: RawTokenValue | None = None

    def get(self, mode: str | None) -> RawTokenValue | None:
        if mode == "light":
            return self.light
        if mode == "dark":
            return self.dark
        return None


class ResolvedToken(BaseModel):
    """Flat, immutable view of one leaf variable of a token document.

    Exactly one value field is populated, chosen by the owning collection's
    mode shape: ``value`` for a single ``Default`` mode, ``values`` for a
    light/dark theme pair and ``brand_values`` for brand-code modes. Slot
    contents are raw: literals and alias strings are stored identically.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str
    path: str
    name: str
    tier: TokenTier
    type: TokenType
    brand: str | None = None
    category: str
    collection: str
    mode_shape: ModeShape = Field(alias="modeShape")
    value: RawTokenValue | None = None
    values: ThemeValues | None = None
    brand_values: dict[str, RawTokenValue] | None = Field(default=None, alias="brandValues")

    @model_validator(mode="after")
    def _validate_contract(self) -> "ResolvedToken":
        if not self.path or self.path.startswith(PATH_SEPARATOR) or self.path.endswith(
            PATH_SEPARATOR
        ):
            raise ValueError(f"token path must be non-empty without edge slashes: {self.path!r}")
        if self.id != f"{self.collection}:{self.path}":
            raise ValueError("token id must equal '<collection>:<path>'")
        if self.name != self.path.split(PATH_SEPARATOR)[-1]:
            raise ValueError("token name must equal the last path segment")
        if self.tier == "global" and self.brand is not None:
            raise ValueError("global tokens may not carry a brand")

        if self.mode_shape == "single":
            populated_ok = self.values is None and self.brand_values is None
        elif self.mode_shape == "theme":
            populated_ok = (
                self.values is not None and self.value is None and self.brand_values is None
            )
        else:
            populated_ok = (
                self.brand_values is not None and self.value is None and self.values is None
            )
        if not populated_ok:
            raise ValueError(f"value fields do not match mode shape {self.mode_shape!r}")
        return self

    def slot_modes(self) -> tuple[str | None, ...]:
        if self.mode_shape == "single":
            return (None,)
        if self.mode_shape == "theme":
            return THEME_MODES
        return tuple(self.brand_values or {})

    def raw_value(self, mode: str | None) -> RawTokenValue | None:
        if self.mode_shape == "single":
            return self.value if mode is None else None
        if self.mode_shape == "theme":
            return self.values.get(mode) if self.values is not None else None
        if mode is None or self.brand_values is None:
            return None
        return self.brand_values.get(mode)


class TokenTreeNode(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    path: str
    children: list[TokenTreeNode] = Field(default_factory=list)
    token: ResolvedToken | None = None
    is_leaf: bool = Field(default=False, alias="isLeaf")

    @model_validator(mode="after")
    def _validate_leaf(self) -> "TokenTreeNode":
        if self.is_leaf != (self.token is not None):
            raise ValueError("is_leaf must be set exactly when a token is attached")
        return self


class TokenValidationError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str
    message: str
    type: TokenValidationErrorType
    collection: str
    mode: str | None = None
    reference: str | None = None


def validation_error_sort_key(error: TokenValidationError) -> tuple[str, str, str, str]:
    return (error.collection, error.path, error.mode or "", error.type)


class TokenValidationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    valid: bool
    errors: list[TokenValidationError] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_contract(self) -> "TokenValidationResult":
        if self.valid != (not self.errors):
            raise ValueError("valid must be true exactly when errors is empty")
        if self.errors != sorted(self.errors, key=validation_error_sort_key):
            raise ValueError("errors must be sorted by (collection, path, mode, type)")
        return self
