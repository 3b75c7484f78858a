from __future__ import annotations

import argparse
import json
from pathlib import Path

from dscp_types import ResolvedToken, TokenDiffReport, TokensDocument, TokenValidationResult
from pydantic import BaseModel

SCHEMA_FILES: dict[str, type[BaseModel]] = {
    "dscp.tokens_document.v1.json": TokensDocument,
    "dscp.resolved_token.v1.json": ResolvedToken,
    "dscp.validation_result.v1.json": TokenValidationResult,
    "dscp.diff_report.v1.json": TokenDiffReport,
}


def _write_schema(path: Path, schema: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(schema, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def write_schemas(schema_dir: Path) -> list[Path]:
    written: list[Path] = []
    for filename, model in SCHEMA_FILES.items():
        path = schema_dir / filename
        _write_schema(path, model.model_json_schema(by_alias=True))
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Export JSON schemas for token contracts.")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("packages/dscp_types/schema"),
        help="Directory to write schema files into",
    )
    args = parser.parse_args(argv)
    for path in write_schemas(args.out_dir):
        print(f"wrote {path}")


if __name__ == "__main__":
    main()
