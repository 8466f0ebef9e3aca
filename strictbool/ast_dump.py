from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from typing import Any


def ast_to_debug_data(node: Any, *, include_spans: bool = False) -> Any:
    if node is None:
        return None

    if isinstance(node, (str, int, float, bool)):
        return node

    if isinstance(node, (list, tuple)):
        return [ast_to_debug_data(item, include_spans=include_spans) for item in node]

    if is_dataclass(node):
        result: dict[str, Any] = {"node": type(node).__name__}
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if node_field.name == "span" and not include_spans:
                continue
            if node_field.name == "type_text" and value is None:
                continue
            result[node_field.name] = ast_to_debug_data(value, include_spans=include_spans)
        return result

    if isinstance(node, dict):
        return {str(k): ast_to_debug_data(v, include_spans=include_spans) for k, v in node.items()}

    raise TypeError(f"Unsupported AST debug serialization value: {type(node).__name__}")


def ast_to_debug_json(node: Any, *, include_spans: bool = False) -> str:
    data = ast_to_debug_data(node, include_spans=include_spans)
    return json.dumps(data, indent=2, sort_keys=True)
