from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .tokens import TokenType
from .values import RawTokenValue

TokenChangeKind = Literal["added", "removed", "changed"]


class TokenChange(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: TokenChangeKind
    path: str
    collection: str
    category: str
    type: TokenType
    mode: str | None = None
    old_value: RawTokenValue | None = Field(default=None, alias="oldValue")
    new_value: RawTokenValue | None = Field(default=None, alias="newValue")
    old_resolved: RawTokenValue | None = Field(default=None, alias="oldResolved")
    new_resolved: RawTokenValue | None = Field(default=None, alias="newResolved")

    @model_validator(mode="after")
    def _validate_kind(self) -> "TokenChange":
        if self.kind == "added" and (self.old_value is not None or self.old_resolved is not None):
            raise ValueError("added changes may not carry an old value")
        if self.kind == "removed" and (
            self.new_value is not None or self.new_resolved is not None
        ):
            raise ValueError("removed changes may not carry a new value")
        if self.kind == "changed" and self.old_value == self.new_value:
            raise ValueError("changed entries require differing raw values")
        return self


class TokenDiffSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_changes: int
    added: int
    removed: int
    changed: int

    @model_validator(mode="after")
    def _validate_total(self) -> "TokenDiffSummary":
        if self.total_changes != self.added + self.removed + self.changed:
            raise ValueError("summary.total_changes must equal the sum of change counts")
        return self


class TokenDiffReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    summary: TokenDiffSummary
    categories: dict[str, int] = Field(default_factory=dict)
    changes: list[TokenChange] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_contract(self) -> "TokenDiffReport":
        counts: dict[TokenChangeKind, int] = {"added": 0, "removed": 0, "changed": 0}
        categories: dict[str, int] = {}
        for change in self.changes:
            counts[change.kind] += 1
            categories[change.category] = categories.get(change.category, 0) + 1

        expected_summary = {
            "total_changes": len(self.changes),
            "added": counts["added"],
            "removed": counts["removed"],
            "changed": counts["changed"],
        }
        if self.summary.model_dump(mode="json") != expected_summary:
            raise ValueError("summary counts must match changes list counts exactly")
        if self.categories != categories:
            raise ValueError("category counts must match changes list counts exactly")
        return self
