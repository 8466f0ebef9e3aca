#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
import argparse
import sys

import yaml


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from strictbool.ast_load import TreeDocument, load_tree_document
from strictbool.options import validate_options
from strictbool.oracle import TypeOracle
from strictbool.rule import check_program


SPEC_SUFFIX = "_spec.yaml"


def _expected_lines(document: TreeDocument, run: dict) -> list[str]:
    strict_null_checks = run.get("strict_null_checks")
    if strict_null_checks is None:
        strict_null_checks = document.strict_null_checks

    options = run.get("options")
    if options is not None:
        options = validate_options(options)

    oracle = TypeOracle(document.program, strict_null_checks=strict_null_checks)
    lines: list[str] = []
    for diag in check_program(document.program, options, oracle=oracle):
        if diag.span is None:
            lines.append(diag.message)
        else:
            lines.append(f"{diag.span.start.line}:{diag.span.start.column} {diag.message}")
    return lines


def refresh_golden_files(golden_dir: Path, pattern: str) -> None:
    for tree_path in sorted(golden_dir.glob(pattern)):
        if tree_path.name.endswith(SPEC_SUFFIX):
            continue
        spec_path = tree_path.with_name(f"{tree_path.stem}{SPEC_SUFFIX}")
        if not spec_path.exists():
            raise FileNotFoundError(f"Missing spec for {tree_path}: expected {spec_path.name}")

        spec = yaml.safe_load(spec_path.read_text(encoding="utf-8")) or {}
        document = load_tree_document(tree_path)
        for run in spec.get("runs") or []:
            run["expect"] = {"diagnostics": _expected_lines(document, run)}

        spec_text = yaml.safe_dump(spec, sort_keys=False, width=1000, allow_unicode=True)
        spec_path.write_text(spec_text, encoding="utf-8")
        print(f"Updated {spec_path.as_posix()}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Refresh expected diagnostics in golden *_spec.yaml files.",
    )
    parser.add_argument(
        "--golden-dir",
        default="tests/golden/cases",
        help="Directory containing golden tree documents and their *_spec.yaml files.",
    )
    parser.add_argument(
        "--filter",
        default="test_*.yaml",
        help="Glob of tree documents to refresh (default: every case).",
    )

    args = parser.parse_args()
    golden_dir = Path(args.golden_dir)

    if not golden_dir.exists():
        raise FileNotFoundError(f"Golden directory does not exist: {golden_dir}")

    refresh_golden_files(golden_dir, args.filter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
