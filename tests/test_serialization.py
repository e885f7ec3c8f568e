"""Tests for AST JSON serialization."""

import json

import pytest

from plantilla import parse
from plantilla.nodes import Attribute, Element, Expression, Fragment
from plantilla.serialization import from_dict, from_json, to_dict, to_json

SOURCE = (
    "---\nconst n = 2;\n---\n<!DOCTYPE html>\n"
    "<ul class=\"list\" hidden data={n}><li>{n}</li><!-- c --><Counter client:load /></ul>"
)


class TestToDict:
    def test_type_discriminator(self) -> None:
        data = to_dict(parse("<p>x</p>").ast)
        assert data["_type"] == "Fragment"
        assert data["children"][0]["_type"] == "Element"
        assert data["children"][0]["children"][0] == {
            "_type": "Text",
            "span": {
                "start": {"line": 1, "column": 4, "offset": 3},
                "end": {"line": 1, "column": 5, "offset": 4},
            },
            "value": "x",
        }

    def test_attribute_values(self) -> None:
        (el,) = parse("<a flag name=\"v\" expr={e}>").ast.children
        attrs = to_dict(el)["attributes"]
        assert [a["value"] for a in attrs[:2]] == [True, "v"]
        assert attrs[2]["value"]["_type"] == "Expression"
        assert attrs[2]["value"]["code"] == "e"


class TestRoundTrip:
    def test_json_round_trip(self) -> None:
        fragment = parse(SOURCE).ast
        assert from_json(to_json(fragment)) == fragment

    def test_deterministic(self) -> None:
        fragment = parse(SOURCE).ast
        assert to_json(fragment) == to_json(parse(SOURCE).ast)
        assert json.loads(to_json(fragment, indent=2)) == json.loads(to_json(fragment))

    def test_incomplete_expression(self) -> None:
        fragment = parse("<p>{oops").ast
        restored = from_json(to_json(fragment))
        expr = restored.children[0].children[0]
        assert isinstance(expr, Expression)
        assert expr.incomplete is True

    def test_subtree(self) -> None:
        (el,) = parse("<b title='t'>x</b>").ast.children
        restored = from_dict(to_dict(el))
        assert isinstance(restored, Element)
        assert isinstance(restored.attributes[0], Attribute)
        assert restored == el


class TestErrors:
    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="_type"):
            from_dict({"value": "x"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown node type"):
            from_dict({"_type": "Paragraph"})

    def test_non_fragment_json(self) -> None:
        text_json = json.dumps(to_dict(parse("hi").ast.children[0]))
        with pytest.raises(ValueError, match="Expected Fragment"):
            from_json(text_json)

    def test_fragment_type(self) -> None:
        assert isinstance(from_json(to_json(parse("").ast)), Fragment)
