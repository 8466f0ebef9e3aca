from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from strictbool.classifier import TypeFailure
from strictbool.lexer import SourceSpan, format_span
from strictbool.messages import SyntaxContext


@dataclass(frozen=True)
class Diagnostic:
    rule: str
    message: str
    failure: TypeFailure
    context: SyntaxContext
    node: object
    span: SourceSpan | None = None

    def format(self) -> str:
        if self.span is None:
            return f"{self.rule}: {self.message}"
        return f"{self.rule}: {self.message} at {format_span(self.span)}"

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rule": self.rule,
            "message": self.message,
            "failure": self.failure.value,
            "context": self.context.value,
            "node": type(self.node).__name__,
        }
        if self.span is not None:
            data["line"] = self.span.start.line
            data["column"] = self.span.start.column
            data["path"] = self.span.start.path
        return data
