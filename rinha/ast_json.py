"""JSON serialization/deserialization for the Rinha AST.

This module converts between Rinha AST dataclasses and the plain
dict/list structures of the JSON AST format, in which every term is an
object tagged by `"kind"` and the program root is
`{"name": ..., "expression": ..., "location": ...}`.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, Union

from .ast import (
    BINARY_OPS,
    Location,
    Parameter,
    File,
    Int,
    Bool,
    Str,
    Var,
    Function,
    Call,
    Binary,
    If,
    Let,
    Tuple,
    First,
    Second,
    Print,
)


def location_to_obj(loc: Location) -> Dict[str, Any]:
    return {"start": loc.start, "end": loc.end, "filename": loc.filename}


def location_from_obj(o: Any) -> Location:
    if o is None:
        return Location()
    if not isinstance(o, dict):
        raise ValueError(f"Invalid location: {o!r}")
    start, end = o.get("start", 0), o.get("end", 0)
    if not all(isinstance(n, int) and not isinstance(n, bool) for n in (start, end)):
        raise ValueError(f"Invalid location: {o!r}")
    return Location(start, end, str(o.get("filename", "")))


def parameter_to_obj(p: Parameter) -> Dict[str, Any]:
    return {"text": p.text, "location": location_to_obj(p.location)}


def parameter_from_obj(o: Any) -> Parameter:
    if not isinstance(o, dict) or not isinstance(o.get("text"), str):
        raise ValueError(f"Invalid binding name: {o!r}")
    return Parameter(text=o["text"], location=location_from_obj(o.get("location")))


def _list_field(obj: Dict[str, Any], field: str) -> list:
    items = obj[field]
    if not isinstance(items, list):
        raise ValueError(f"{obj.get('kind')} field {field!r} must be a list, got {items!r}")
    return items


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, File):
        return {
            "name": node.name,
            "expression": ast_to_obj(node.expression),
            "location": location_to_obj(node.location),
        }

    loc = location_to_obj(node.location)
    if isinstance(node, Int):
        return {"kind": "Int", "value": node.value, "location": loc}
    if isinstance(node, Bool):
        return {"kind": "Bool", "value": node.value, "location": loc}
    if isinstance(node, Str):
        return {"kind": "Str", "value": node.value, "location": loc}
    if isinstance(node, Var):
        return {"kind": "Var", "text": node.text, "location": loc}
    if isinstance(node, Function):
        return {
            "kind": "Function",
            "parameters": [parameter_to_obj(p) for p in node.parameters],
            "value": ast_to_obj(node.value),
            "location": loc,
        }
    if isinstance(node, Call):
        return {
            "kind": "Call",
            "callee": ast_to_obj(node.callee),
            "arguments": [ast_to_obj(a) for a in node.arguments],
            "location": loc,
        }
    if isinstance(node, Binary):
        return {"kind": "Binary", "lhs": ast_to_obj(node.lhs), "op": node.op, "rhs": ast_to_obj(node.rhs), "location": loc}
    if isinstance(node, If):
        return {
            "kind": "If",
            "condition": ast_to_obj(node.condition),
            "then": ast_to_obj(node.then),
            "otherwise": ast_to_obj(node.otherwise),
            "location": loc,
        }
    if isinstance(node, Let):
        return {
            "kind": "Let",
            "name": parameter_to_obj(node.name),
            "value": ast_to_obj(node.value),
            "next": ast_to_obj(node.next),
            "location": loc,
        }
    if isinstance(node, Tuple):
        return {"kind": "Tuple", "first": ast_to_obj(node.first), "second": ast_to_obj(node.second), "location": loc}
    if isinstance(node, First):
        return {"kind": "First", "value": ast_to_obj(node.value), "location": loc}
    if isinstance(node, Second):
        return {"kind": "Second", "value": ast_to_obj(node.value), "location": loc}
    if isinstance(node, Print):
        return {"kind": "Print", "value": ast_to_obj(node.value), "location": loc}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if not isinstance(obj, dict):
        raise ValueError("Invalid AST object")
    if "kind" not in obj and "expression" in obj:
        return File(
            name=str(obj.get("name", "")),
            expression=ast_from_obj(obj["expression"]),
            location=location_from_obj(obj.get("location")),
        )
    try:
        return _term_from_obj(obj)
    except KeyError as e:
        raise ValueError(f"{obj.get('kind')} term is missing field {e.args[0]!r}") from None


def _term_from_obj(obj: Dict[str, Any]) -> Any:
    t = obj.get("kind")
    loc = location_from_obj(obj.get("location"))
    if t == "Int":
        value = obj["value"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Int literal must be an integer, got {value!r}")
        return Int(value=value, location=loc)
    if t == "Bool":
        if not isinstance(obj["value"], bool):
            raise ValueError(f"Bool literal must be a boolean, got {obj['value']!r}")
        return Bool(value=obj["value"], location=loc)
    if t == "Str":
        if not isinstance(obj["value"], str):
            raise ValueError(f"Str literal must be a string, got {obj['value']!r}")
        return Str(value=obj["value"], location=loc)
    if t == "Var":
        if not isinstance(obj["text"], str):
            raise ValueError(f"Var name must be a string, got {obj['text']!r}")
        return Var(text=obj["text"], location=loc)
    if t == "Function":
        return Function(
            parameters=[parameter_from_obj(p) for p in _list_field(obj, "parameters")],
            value=ast_from_obj(obj["value"]),
            location=loc,
        )
    if t == "Call":
        return Call(
            callee=ast_from_obj(obj["callee"]),
            arguments=[ast_from_obj(a) for a in _list_field(obj, "arguments")],
            location=loc,
        )
    if t == "Binary":
        if obj["op"] not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator: {obj['op']}")
        return Binary(lhs=ast_from_obj(obj["lhs"]), op=obj["op"], rhs=ast_from_obj(obj["rhs"]), location=loc)
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then=ast_from_obj(obj["then"]),
            otherwise=ast_from_obj(obj["otherwise"]),
            location=loc,
        )
    if t == "Let":
        return Let(
            name=parameter_from_obj(obj["name"]),
            value=ast_from_obj(obj["value"]),
            next=ast_from_obj(obj["next"]),
            location=loc,
        )
    if t == "Tuple":
        return Tuple(first=ast_from_obj(obj["first"]), second=ast_from_obj(obj["second"]), location=loc)
    if t == "First":
        return First(value=ast_from_obj(obj["value"]), location=loc)
    if t == "Second":
        return Second(value=ast_from_obj(obj["value"]), location=loc)
    if t == "Print":
        return Print(value=ast_from_obj(obj["value"]), location=loc)
    if t == "Error":
        # emitted by front ends in place of a term that failed to parse
        raise ValueError(f"AST contains a syntax error: {obj.get('message', '')} {obj.get('full_text', '')}".rstrip())

    raise ValueError(f"Unknown AST node type: {t}")


def load_file(path: Union[str, pathlib.Path]) -> Any:
    """Read and decode a JSON AST file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return ast_from_obj(data)
