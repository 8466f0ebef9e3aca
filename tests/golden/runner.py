from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from strictbool.ast_load import TreeDocument, load_tree_document
from strictbool.diagnostics import Diagnostic
from strictbool.options import validate_options
from strictbool.oracle import TypeOracle
from strictbool.rule import check_program


GOLDEN_ROOT = REPO_ROOT / "tests" / "golden" / "cases"
SPEC_SUFFIX = "_spec.yaml"


@dataclass(frozen=True)
class RunCase:
    name: str
    options: list[str] | None
    strict_null_checks: bool | None
    expected: list[str]


@dataclass(frozen=True)
class GoldenTest:
    source_path: Path
    spec_path: Path
    runs: list[RunCase]


@dataclass(frozen=True)
class RunResult:
    name: str
    ok: bool
    actual: list[str]
    details: list[str]


@dataclass(frozen=True)
class TestResult:
    source_path: Path
    load_ok: bool
    load_error: str | None
    run_results: list[RunResult]

    @property
    def ok(self) -> bool:
        if not self.load_ok:
            return False
        return all(run.ok for run in self.run_results)


def _require_type(value: object, expected_type: type, label: str) -> None:
    if not isinstance(value, expected_type):
        raise ValueError(f"{label} must be {expected_type.__name__}")


def _parse_options(raw: object, *, spec_path: Path, run_name: str) -> list[str] | None:
    if raw is None:
        return None
    try:
        return validate_options(raw)
    except ValueError as error:
        raise ValueError(f"{spec_path}: run '{run_name}' options: {error}") from error


def _parse_expected(raw: object, *, spec_path: Path, run_name: str) -> list[str]:
    if raw is None:
        return []

    _require_type(raw, dict, f"{spec_path}: run '{run_name}' expect")
    expect_obj: dict[str, object] = raw  # type: ignore[assignment]

    diagnostics_raw = expect_obj.get("diagnostics", [])
    if diagnostics_raw is None:
        return []
    _require_type(diagnostics_raw, list, f"{spec_path}: run '{run_name}' expect.diagnostics")
    expected: list[str] = []
    for index, item in enumerate(diagnostics_raw):
        _require_type(item, str, f"{spec_path}: run '{run_name}' expect.diagnostics[{index}]")
        expected.append(item)
    return expected


def spec_path_for(source_path: Path) -> Path:
    return source_path.with_name(f"{source_path.stem}{SPEC_SUFFIX}")


def load_spec_for_source(source_path: Path) -> GoldenTest:
    spec_path = spec_path_for(source_path)
    if not spec_path.exists():
        raise ValueError(f"missing spec for {source_path}: expected {spec_path.name}")

    raw_data = yaml.safe_load(spec_path.read_text(encoding="utf-8"))
    if raw_data is None:
        raw_data = {}
    _require_type(raw_data, dict, f"{spec_path}")
    data: dict[str, object] = raw_data  # type: ignore[assignment]

    runs_raw = data.get("runs")
    if runs_raw is None:
        raise ValueError(f"{spec_path}: missing required top-level 'runs'")
    _require_type(runs_raw, list, f"{spec_path}: runs")
    if len(runs_raw) == 0:
        raise ValueError(f"{spec_path}: runs must not be empty")

    runs: list[RunCase] = []
    names: set[str] = set()
    for index, run_raw in enumerate(runs_raw):
        _require_type(run_raw, dict, f"{spec_path}: runs[{index}]")
        run_obj: dict[str, object] = run_raw  # type: ignore[assignment]

        name_raw = run_obj.get("name")
        _require_type(name_raw, str, f"{spec_path}: runs[{index}].name")
        if name_raw in names:
            raise ValueError(f"{spec_path}: duplicate run name '{name_raw}'")
        names.add(name_raw)

        strict_raw = run_obj.get("strict_null_checks")
        if strict_raw is not None:
            _require_type(strict_raw, bool, f"{spec_path}: run '{name_raw}' strict_null_checks")

        runs.append(
            RunCase(
                name=name_raw,
                options=_parse_options(run_obj.get("options"), spec_path=spec_path, run_name=name_raw),
                strict_null_checks=strict_raw,
                expected=_parse_expected(run_obj.get("expect"), spec_path=spec_path, run_name=name_raw),
            )
        )

    return GoldenTest(source_path=source_path, spec_path=spec_path, runs=runs)


def discover_tests(filter_glob: str | None = None) -> list[GoldenTest]:
    if not GOLDEN_ROOT.exists():
        return []

    pattern = filter_glob or "**/test_*.yaml"
    source_files = sorted(
        path
        for path in GOLDEN_ROOT.glob(pattern)
        if path.is_file() and not path.name.endswith(SPEC_SUFFIX)
    )
    return [load_spec_for_source(path) for path in source_files]


def format_expectation(diag: Diagnostic) -> str:
    if diag.span is None:
        return diag.message
    return f"{diag.span.start.line}:{diag.span.start.column} {diag.message}"


def collect_run(document: TreeDocument, run: RunCase) -> list[str]:
    strict_null_checks = document.strict_null_checks if run.strict_null_checks is None else run.strict_null_checks
    oracle = TypeOracle(document.program, strict_null_checks=strict_null_checks)
    diagnostics = check_program(document.program, run.options, oracle=oracle)
    return [format_expectation(diag) for diag in diagnostics]


def execute_run(document: TreeDocument, run: RunCase) -> RunResult:
    actual = collect_run(document, run)
    details: list[str] = []
    if actual != run.expected:
        details.append(f"expected {len(run.expected)} diagnostic(s), got {len(actual)}")
        for line in run.expected:
            if line not in actual:
                details.append(f"missing  | {line}")
        for line in actual:
            if line not in run.expected:
                details.append(f"extra    | {line}")
        if len(details) == 1:
            details.append("diagnostics differ in order")
    return RunResult(name=run.name, ok=not details, actual=actual, details=details)


def _run_test(test: GoldenTest) -> TestResult:
    try:
        document = load_tree_document(test.source_path)
    except ValueError as error:
        return TestResult(
            source_path=test.source_path,
            load_ok=False,
            load_error=str(error),
            run_results=[],
        )

    run_results = [execute_run(document, run) for run in test.runs]
    return TestResult(
        source_path=test.source_path,
        load_ok=True,
        load_error=None,
        run_results=run_results,
    )


def _print_result_per_file(result: TestResult) -> None:
    rel_path = result.source_path.relative_to(REPO_ROOT)
    if result.ok:
        print(f"PASS {rel_path}")
        return

    print(f"FAIL {rel_path}")
    if not result.load_ok:
        print(f"  load: {result.load_error}")
        return

    for run in result.run_results:
        if run.ok:
            continue
        print(f"  run '{run.name}':")
        for detail in run.details:
            print(f"    - {detail}")


def _print_result_per_run(result: TestResult) -> None:
    rel_path = result.source_path.relative_to(REPO_ROOT)
    if not result.load_ok:
        print(f"FAIL {rel_path} :: <load>")
        print(f"  load: {result.load_error}")
        return

    for run in result.run_results:
        status = "PASS" if run.ok else "FAIL"
        print(f"{status} {rel_path} :: {run.name}")
        if not run.ok:
            for detail in run.details:
                print(f"  - {detail}")


def _print_result(result: TestResult, *, per_run: bool) -> None:
    if per_run:
        _print_result_per_run(result)
        return
    _print_result_per_file(result)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run strictbool golden tests")
    parser.add_argument("--jobs", type=int, default=os.cpu_count() or 1, help="Number of concurrent workers")
    parser.add_argument("--filter", type=str, default=None, help="Glob under tests/golden/cases (e.g. 'test_loops*')")
    parser.add_argument(
        "--print-per-run",
        action="store_true",
        help="Print one PASS/FAIL line per run case instead of per test file",
    )
    args = parser.parse_args()

    try:
        tests = discover_tests(args.filter)
    except Exception as error:
        print(f"golden: spec error: {error}", file=sys.stderr)
        return 2

    if not tests:
        print("golden: no tests discovered")
        return 0

    from concurrent.futures import ThreadPoolExecutor, as_completed

    results: list[TestResult] = []
    with ThreadPoolExecutor(max_workers=max(1, args.jobs)) as pool:
        futures = [pool.submit(_run_test, test) for test in tests]
        for future in as_completed(futures):
            result = future.result()
            results.append(result)
            _print_result(result, per_run=args.print_per_run)

    failed = [result for result in results if not result.ok]
    total_runs = sum(len(test.runs) for test in tests)
    print(f"golden: {len(results) - len(failed)}/{len(results)} test files passed; {total_runs} runs total")

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
