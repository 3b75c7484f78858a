from .changes import TokenChange, TokenChangeKind, TokenDiffReport, TokenDiffSummary
from .document import (
    TokenCollection,
    TokensDocument,
    TokenVariable,
    VariableGroup,
    VariableType,
    parse_tokens_document,
)
from .errors import (
    TokenDocumentError,
    TokenEngineError,
    TokenErrorDetail,
    TokenUpdateError,
    TokenWriteBackError,
)
from .tokens import (
    THEME_MODES,
    ModeShape,
    ResolvedToken,
    ThemeValues,
    TokenMode,
    TokenTier,
    TokenTreeNode,
    TokenType,
    TokenValidationError,
    TokenValidationErrorType,
    TokenValidationResult,
    validation_error_sort_key,
)
from .values import (
    ALIAS_SEPARATOR,
    PATH_SEPARATOR,
    AliasRef,
    LiteralValue,
    MalformedAlias,
    RawTokenValue,
    TokenValue,
    format_alias,
    is_alias,
    parse_alias,
    parse_token_value,
)

__all__ = [
    "ALIAS_SEPARATOR",
    "PATH_SEPARATOR",
    "THEME_MODES",
    "AliasRef",
    "LiteralValue",
    "MalformedAlias",
    "ModeShape",
    "RawTokenValue",
    "ResolvedToken",
    "ThemeValues",
    "TokenChange",
    "TokenChangeKind",
    "TokenCollection",
    "TokenDiffReport",
    "TokenDiffSummary",
    "TokenDocumentError",
    "TokenEngineError",
    "TokenErrorDetail",
    "TokenMode",
    "TokenTier",
    "TokenTreeNode",
    "TokenType",
    "TokenUpdateError",
    "TokenValidationError",
    "TokenValidationErrorType",
    "TokenValidationResult",
    "TokenValue",
    "TokenVariable",
    "TokenWriteBackError",
    "TokensDocument",
    "VariableGroup",
    "VariableType",
    "format_alias",
    "is_alias",
    "parse_alias",
    "parse_token_value",
    "parse_tokens_document",
    "validation_error_sort_key",
]

__version__ = "0.1.0"
