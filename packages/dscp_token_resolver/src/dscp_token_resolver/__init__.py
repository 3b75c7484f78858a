from .config import TokenEngineConfig
from .diffing import build_token_diff_report, diff_tokens
from .parser import ModeLayout, TokenParser, flatten, flatten_for_brand, mode_layout
from .resolver import ChainOutcome, TokenResolver
from .tree import build_tree, filter_tree_by_brand, flatten_tree, get_categories
from .writeback import (
    StagedTokenUpdate,
    apply_token_update,
    find_new_validation_errors,
    stage_token_update,
    update_commit_message,
)

__all__ = [
    "ChainOutcome",
    "ModeLayout",
    "StagedTokenUpdate",
    "TokenEngineConfig",
    "TokenParser",
    "TokenResolver",
    "apply_token_update",
    "build_token_diff_report",
    "build_tree",
    "diff_tokens",
    "filter_tree_by_brand",
    "find_new_validation_errors",
    "flatten",
    "flatten_for_brand",
    "flatten_tree",
    "get_categories",
    "mode_layout",
    "stage_token_update",
    "update_commit_message",
]

__version__ = "0.1.0"
