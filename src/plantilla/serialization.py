"""JSON interchange for template ASTs.

``to_dict`` turns a node into plain dicts, lists and scalars. Each node
dict names its class under ``"_type"``, and spans become nested
``{"start": ..., "end": ...}`` position dicts. ``from_dict`` reverses it,
rebuilding tuples and frozen nodes. ``to_json`` sorts keys, so equal trees
always produce identical text (handy as a build-cache key).

Example:
    from plantilla import parse
    from plantilla.serialization import from_json, to_json

    fragment = parse("<h1>{title}</h1>").ast
    assert from_json(to_json(fragment)) == fragment

"""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any

from plantilla.location import Position, Span
from plantilla.nodes import (
    Attribute,
    Comment,
    Component,
    Doctype,
    Element,
    Expression,
    Fragment,
    Frontmatter,
    Node,
    Text,
)

_NODE_TYPES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Fragment,
        Frontmatter,
        Element,
        Component,
        Attribute,
        Text,
        Expression,
        Comment,
        Doctype,
    )
}


def to_dict(node: Node) -> dict[str, Any]:
    """Plain-data form of node and everything below it."""
    data: dict[str, Any] = {"_type": type(node).__name__}
    data.update((f.name, _encode(getattr(node, f.name))) for f in fields(node))
    return data


def _encode(value: Any) -> Any:
    match value:
        case Node():
            return to_dict(value)
        case Span(start=start, end=end):
            return {"start": _encode(start), "end": _encode(end)}
        case Position(line=line, column=column, offset=offset):
            return {"line": line, "column": column, "offset": offset}
        case tuple():
            return [_encode(item) for item in value]
        case _:
            return value


def from_dict(data: dict[str, Any]) -> Node:
    """Rebuild a node from the output of to_dict.

    Raises:
        ValueError: If ``_type`` is absent or names no node class.
    """
    if "_type" not in data:
        raise ValueError("Serialized node has no '_type' field")
    type_name = data["_type"]
    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        raise ValueError(f"Unknown node type: {type_name!r}")

    kwargs = {
        f.name: _decode_span(data[f.name]) if f.name == "span" else _decode(data[f.name])
        for f in fields(node_cls)
        if f.name in data
    }
    return node_cls(**kwargs)


def _decode(value: Any) -> Any:
    match value:
        case {"_type": _}:
            return from_dict(value)
        case list():
            return tuple(_decode(item) for item in value)
        case _:
            return value


def _decode_span(value: dict[str, Any]) -> Span:
    return Span(Position(**value["start"]), Position(**value["end"]))


def to_json(fragment: Fragment, *, indent: int | None = None) -> str:
    """Serialize a Fragment as JSON with sorted keys."""
    return json.dumps(to_dict(fragment), sort_keys=True, indent=indent)


def from_json(data: str) -> Fragment:
    """Parse JSON produced by to_json back into a Fragment.

    Raises:
        ValueError: If the document is not a serialized Fragment.
    """
    node = from_dict(json.loads(data))
    if not isinstance(node, Fragment):
        raise ValueError(f"Expected Fragment, got {type(node).__name__}")
    return node
