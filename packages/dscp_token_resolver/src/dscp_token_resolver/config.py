from __future__ import annotations

import os
import re
from dataclasses import dataclass

from dscp_types import TokenTier

DEFAULT_BRANDS: tuple[str, ...] = ("acpd", "eeaa")
DEFAULT_GLOBAL_COLLECTION = "Global"
DEFAULT_BRAND_COLLECTION = "Brand"
DEFAULT_SINGLE_MODE = "Default"

_BRAND_CODE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip()
    return raw or default


def _env_brands(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default

    brands: list[str] = []
    for part in raw.split(","):
        code = part.strip().lower()
        if not code:
            continue
        if not _BRAND_CODE_PATTERN.match(code):
            raise RuntimeError(f"{name} contains an invalid brand code: {part.strip()!r}")
        if code not in brands:
            brands.append(code)
    if not brands:
        raise RuntimeError(f"{name} must list at least one brand code")
    return tuple(brands)


@dataclass(frozen=True)
class TokenEngineConfig:
    brands: tuple[str, ...] = DEFAULT_BRANDS
    global_collection: str = DEFAULT_GLOBAL_COLLECTION
    brand_collection: str = DEFAULT_BRAND_COLLECTION
    single_mode: str = DEFAULT_SINGLE_MODE

    def is_brand(self, value: str | None) -> bool:
        return value is not None and value.casefold() in self.brands

    def tier_for(self, collection_name: str) -> TokenTier:
        name = collection_name.casefold()
        if name == self.global_collection.casefold():
            return "global"
        if name == self.brand_collection.casefold():
            return "brand"
        return "component"

    @classmethod
    def from_env(cls) -> "TokenEngineConfig":
        return cls(
            brands=_env_brands("DSCP_TOKEN_BRANDS", DEFAULT_BRANDS),
            global_collection=_env_str("DSCP_GLOBAL_COLLECTION", DEFAULT_GLOBAL_COLLECTION),
            brand_collection=_env_str("DSCP_BRAND_COLLECTION", DEFAULT_BRAND_COLLECTION),
            single_mode=_env_str("DSCP_DEFAULT_MODE", DEFAULT_SINGLE_MODE),
        )
