"""Build typed trees from the document shape produced by ``ast_dump``.

A tree document is YAML (JSON works too)::

    compilerOptions:
      strictNullChecks: true
    program:
      node: ProgramAst
      statements:
        - node: IfStmt
          condition: {node: IdentifierExpr, name: flag, type_text: "boolean | undefined"}
          then_branch: {node: BlockStmt, statements: []}
          else_branch: null

Spans may be written out in full (``include_spans`` dump form) or as a short
``"line:column"`` / ``"line:column-line:column"`` string.
"""

from __future__ import annotations

import logging
import re
from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from strictbool.ast_nodes import NODE_TYPES, ProgramAst
from strictbool.lexer import SourcePos, SourceSpan

logger = logging.getLogger(__name__)

NODE_CLASSES: dict[str, type] = {cls.__name__: cls for cls in (*NODE_TYPES, SourceSpan, SourcePos)}

_SHORT_SPAN_RE = re.compile(r"^(\d+):(\d+)(?:-(\d+):(\d+))?$")


class TreeLoadError(ValueError):
    def __init__(self, message: str, location: str = "$"):
        super().__init__(f"{location}: {message}")
        self.message = message
        self.location = location


@dataclass(frozen=True)
class TreeDocument:
    program: ProgramAst
    strict_null_checks: bool
    source_path: str


def _short_span(text: str, source_path: str, location: str) -> SourceSpan:
    match = _SHORT_SPAN_RE.match(text.strip())
    if match is None:
        raise TreeLoadError(f"invalid span '{text}' (expected 'line:column' or 'line:column-line:column')", location)
    start_line, start_column = int(match.group(1)), int(match.group(2))
    end_line = int(match.group(3)) if match.group(3) else start_line
    end_column = int(match.group(4)) if match.group(4) else start_column
    return SourceSpan(
        start=SourcePos(path=source_path, offset=0, line=start_line, column=start_column),
        end=SourcePos(path=source_path, offset=0, line=end_line, column=end_column),
    )


def ast_from_data(data: Any, *, source_path: str = "<tree>", location: str = "$") -> Any:
    if isinstance(data, list):
        return [
            ast_from_data(item, source_path=source_path, location=f"{location}[{index}]")
            for index, item in enumerate(data)
        ]

    if not isinstance(data, dict):
        return data

    name = data.get("node")
    if name is None:
        raise TreeLoadError("mapping without a 'node' key", location)
    cls = NODE_CLASSES.get(name)
    if cls is None:
        raise TreeLoadError(f"unknown node '{name}'", location)

    known = {node_field.name: node_field for node_field in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "node":
            continue
        if key not in known:
            raise TreeLoadError(f"unexpected field '{key}' for {name}", location)
        child_location = f"{location}.{key}"
        if key == "span" and isinstance(value, str):
            kwargs[key] = _short_span(value, source_path, child_location)
        else:
            kwargs[key] = ast_from_data(value, source_path=source_path, location=child_location)

    missing = [
        node_field.name
        for node_field in known.values()
        if node_field.name not in kwargs
        and node_field.default is MISSING
        and node_field.default_factory is MISSING
    ]
    if missing:
        raise TreeLoadError(f"{name} is missing field(s): {', '.join(missing)}", location)

    return cls(**kwargs)


def tree_document_from_data(data: Any, *, source_path: str = "<tree>") -> TreeDocument:
    if not isinstance(data, dict):
        raise TreeLoadError("tree document must be a mapping")

    compiler_options = data.get("compilerOptions") or {}
    if not isinstance(compiler_options, dict):
        raise TreeLoadError("must be a mapping", "$.compilerOptions")
    strict_null_checks = compiler_options.get("strictNullChecks", True)
    if not isinstance(strict_null_checks, bool):
        raise TreeLoadError("must be true or false", "$.compilerOptions.strictNullChecks")

    program_raw = data.get("program")
    if not isinstance(program_raw, dict):
        raise TreeLoadError("missing required mapping 'program'", "$.program")
    program_raw = {"node": "ProgramAst", **program_raw}

    program = ast_from_data(program_raw, source_path=source_path, location="$.program")
    if not isinstance(program, ProgramAst):
        raise TreeLoadError(f"expected ProgramAst, got {type(program).__name__}", "$.program")

    return TreeDocument(program=program, strict_null_checks=strict_null_checks, source_path=source_path)


def load_tree_document(path: Path | str) -> TreeDocument:
    tree_path = Path(path)
    try:
        text = tree_path.read_text(encoding="utf-8")
    except OSError as error:
        raise TreeLoadError(f"cannot read tree document: {error.strerror}", str(tree_path)) from error

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise TreeLoadError(f"invalid YAML: {error}", str(tree_path)) from error
    logger.info("loaded tree document %s", tree_path)
    return tree_document_from_data(raw, source_path=tree_path.as_posix())
