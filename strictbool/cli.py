from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from strictbool.ast_dump import ast_to_debug_json
from strictbool.ast_load import load_tree_document
from strictbool.config import DEFAULT_CONFIG_NAME, LintConfig, find_config, load_config
from strictbool.diagnostics import Diagnostic
from strictbool.options import RECOGNIZED_OPTIONS, validate_options
from strictbool.oracle import TypeOracle
from strictbool.rule import check_program

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["text", "json"]


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _resolve_rule_options(args: argparse.Namespace, input_path: Path) -> tuple[str, ...]:
    if args.options is not None:
        return tuple(validate_options(args.options))

    config_path = Path(args.config) if args.config else find_config(input_path.resolve().parent)
    if config_path is None:
        logger.info("no %s found; using default options", DEFAULT_CONFIG_NAME)
        return LintConfig().effective_options()
    return load_config(config_path).effective_options()


def _print_diagnostics(diagnostics: list[Diagnostic], output_format: str) -> None:
    if output_format == "json":
        print(json.dumps([diag.to_data() for diag in diagnostics], indent=2))
        return
    for diag in diagnostics:
        print(diag.format())


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="strictbool",
        description="Report non-boolean types used in boolean contexts of a typed tree.",
    )
    parser.add_argument("input", help="Typed tree document (.yaml or .json)")
    parser.add_argument("--config", help=f"Config file (default: nearest {DEFAULT_CONFIG_NAME})")
    parser.add_argument(
        "--option",
        action="append",
        dest="options",
        metavar="NAME",
        help=f"Rule option, repeatable; replaces the config's list ({', '.join(RECOGNIZED_OPTIONS)})",
    )
    parser.add_argument(
        "--no-strict-null-checks",
        action="store_true",
        help="Check as if the project were compiled without strictNullChecks",
    )
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="text", help="Diagnostic output format")
    parser.add_argument("--print-ast", action="store_true", help="Print the loaded tree as JSON")
    parser.add_argument("--print-ast-spans", action="store_true", help="Include spans in --print-ast output")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for every checked site)")
    args = parser.parse_args()

    _configure_logging(args.verbose)

    try:
        input_path = Path(args.input)
        document = load_tree_document(input_path)
        if args.print_ast:
            print(ast_to_debug_json(document.program, include_spans=args.print_ast_spans))

        rule_options = _resolve_rule_options(args, input_path)
        strict_null_checks = document.strict_null_checks and not args.no_strict_null_checks
        oracle = TypeOracle(document.program, strict_null_checks=strict_null_checks)
        diagnostics = check_program(document.program, rule_options, oracle=oracle)
    except Exception as error:
        print(f"strictbool: {error}", file=sys.stderr)
        return 2

    _print_diagnostics(diagnostics, args.format)
    logger.info("%d diagnostic(s) in %s", len(diagnostics), input_path)
    return 1 if diagnostics else 0
