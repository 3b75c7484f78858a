from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dscp_types import TokenEngineError

from .config import TokenEngineConfig
from .diffing import build_token_diff_report
from .parser import TokenParser
from .resolver import TokenResolver
from .tree import build_tree

logger = logging.getLogger(__name__)


def _read_document(path: Path) -> bytes:
    return path.read_bytes()


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _resolver_for(path: Path, config: TokenEngineConfig) -> TokenResolver:
    parser = TokenParser(_read_document(path), config=config)
    return TokenResolver(parser.parse_all(), config=config)


def _cmd_validate(args: argparse.Namespace, config: TokenEngineConfig) -> int:
    result = _resolver_for(args.document, config).validate()
    _emit(result.model_dump(mode="json"))
    return 0 if result.valid else 1


def _cmd_resolve(args: argparse.Namespace, config: TokenEngineConfig) -> int:
    resolver = _resolver_for(args.document, config)
    token = resolver.get(args.path)
    if token is None:
        print(f"error[token_not_found]: {args.path}", file=sys.stderr)
        return 1
    _emit(
        {
            "token": token.model_dump(mode="json", by_alias=True),
            "resolvedValue": resolver.resolve(args.path, args.mode, brand=args.brand),
        }
    )
    return 0


def _cmd_resolve_all(args: argparse.Namespace, config: TokenEngineConfig) -> int:
    _emit(_resolver_for(args.document, config).resolve_all(args.brand, args.mode))
    return 0


def _cmd_tree(args: argparse.Namespace, config: TokenEngineConfig) -> int:
    parser = TokenParser(_read_document(args.document), config=config)
    tokens = parser.parse_by_brand(args.brand) if args.brand else parser.parse_all()
    tree = build_tree(tokens)
    _emit(tree.model_dump(mode="json", by_alias=True))
    return 0


def _cmd_diff(args: argparse.Namespace, config: TokenEngineConfig) -> int:
    report = build_token_diff_report(
        _read_document(args.base),
        _read_document(args.head),
        config=config,
    )
    _emit(report.model_dump(mode="json", by_alias=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dscp-tokens",
        description="Resolve, validate and diff layered design-token documents.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Report reference errors")
    validate.add_argument("document", type=Path)
    validate.set_defaults(handler=_cmd_validate)

    resolve = subparsers.add_parser("resolve", help="Resolve one token to its literal")
    resolve.add_argument("document", type=Path)
    resolve.add_argument("path")
    resolve.add_argument("--mode", default="light")
    resolve.add_argument("--brand", default=None)
    resolve.set_defaults(handler=_cmd_resolve)

    resolve_all = subparsers.add_parser("resolve-all", help="Resolve every token of a brand")
    resolve_all.add_argument("document", type=Path)
    resolve_all.add_argument("--brand", required=True)
    resolve_all.add_argument("--mode", default="light")
    resolve_all.set_defaults(handler=_cmd_resolve_all)

    tree = subparsers.add_parser("tree", help="Print the navigation tree")
    tree.add_argument("document", type=Path)
    tree.add_argument("--brand", default=None)
    tree.set_defaults(handler=_cmd_tree)

    diff = subparsers.add_parser("diff", help="Token-level changes between two documents")
    diff.add_argument("base", type=Path)
    diff.add_argument("head", type=Path)
    diff.set_defaults(handler=_cmd_diff)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = TokenEngineConfig.from_env()
    except RuntimeError as exc:
        print(f"error[config]: {exc}", file=sys.stderr)
        return 2
    try:
        return args.handler(args, config)
    except TokenEngineError as exc:
        print(f"error[{exc.code}]: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        logger.debug("could not read input", exc_info=True)
        print(f"error[io]: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
