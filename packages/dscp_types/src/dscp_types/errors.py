from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TokenErrorDetail(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class TokenEngineError(ValueError):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.detail = TokenErrorDetail(
            code=code,
            message=message,
            context=context or {},
        )


class TokenDocumentError(TokenEngineError):
    """The token document itself is not well-formed."""


class TokenUpdateError(TokenEngineError):
    """A token update request is ambiguous or carries an unusable value."""


class TokenWriteBackError(TokenEngineError):
    """An updated token could not be located in the raw document."""
