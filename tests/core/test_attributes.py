"""
tests/core/test_attributes.py - core/attributes.py 테스트
"""

import pytest

from core.attributes import AttributeKind, AttributeValue, AttributeView
from core.exceptions import SkipResourceError, ValidationError


class TestAttributeValue:
    """AttributeValue 분류 테스트"""

    @pytest.mark.parametrize(
        "raw,kind",
        [
            ("vpc-1", AttributeKind.STRING),
            ("", AttributeKind.STRING),
            (80, AttributeKind.NUMBER),
            (1.5, AttributeKind.NUMBER),
            (True, AttributeKind.BOOL),
            (False, AttributeKind.BOOL),
            ([1, 2], AttributeKind.LIST),
            (("a",), AttributeKind.LIST),
            ({"k": "v"}, AttributeKind.MAP),
            (None, AttributeKind.NULL),
        ],
    )
    def test_of(self, raw, kind):
        assert AttributeValue.of(raw).kind is kind

    def test_bool_is_not_number(self):
        """bool은 int의 서브클래스지만 bool로 분류"""
        assert AttributeValue.of(True).type_name == "bool"

    def test_of_passthrough(self):
        value = AttributeValue.of("x")
        assert AttributeValue.of(value) is value

    def test_of_unsupported(self):
        with pytest.raises(TypeError):
            AttributeValue.of(object())

    def test_unknown(self):
        value = AttributeValue.unknown()
        assert value.type_name == "unknown"
        assert not value.is_known
        assert not value.is_string

    def test_as_string(self):
        assert AttributeValue.of("abc").as_string() == "abc"
        with pytest.raises(TypeError):
            AttributeValue.of(1).as_string()


class TestAttributeView:
    """AttributeView 테스트"""

    def test_missing_key_is_null(self):
        view = AttributeView.from_mapping({})
        assert view["missing"].kind is AttributeKind.NULL
        assert "missing" not in view
        assert len(view) == 0

    def test_mapping_protocol(self):
        view = AttributeView.from_mapping({"a": "1", "b": 2})
        assert sorted(view) == ["a", "b"]
        assert len(view) == 2
        assert "a" in view
        assert view["b"].raw == 2

    def test_unknown_overrides(self):
        view = AttributeView.from_mapping({"vpc_id": None}, unknown=["vpc_id", "arn"])
        assert view["vpc_id"].kind is AttributeKind.UNKNOWN
        assert view["arn"].kind is AttributeKind.UNKNOWN

    def test_from_none(self):
        assert len(AttributeView.from_mapping(None)) == 0

    def test_to_dict_drops_unknown(self):
        view = AttributeView.from_mapping({"a": "x", "b": [1]}, unknown=["c"])
        assert view.to_dict() == {"a": "x", "b": [1]}


class TestRequireString:
    """require_string 테스트"""

    def test_string(self):
        view = AttributeView.from_mapping({"vpc_id": "vpc-123"})
        assert view.require_string("vpc_id", "web") == "vpc-123"

    def test_empty_string_is_valid(self):
        view = AttributeView.from_mapping({"vpc_id": ""})
        assert view.require_string("vpc_id", "web") == ""

    def test_missing(self):
        view = AttributeView.from_mapping({})

        with pytest.raises(SkipResourceError) as exc_info:
            view.require_string("vpc_id", "web", label="vpc id")

        error = exc_info.value
        assert error.resource_name == "web"
        assert error.attribute == "vpc_id"
        assert error.actual_type == "null"
        assert str(error) == "skipping web because its vpc id (vpc_id) was not a string but null"

    @pytest.mark.parametrize(
        "raw,type_name",
        [(42, "number"), (True, "bool"), (["a"], "list"), ({"a": 1}, "map")],
    )
    def test_wrong_type(self, raw, type_name):
        view = AttributeView.from_mapping({"cluster": raw})

        with pytest.raises(SkipResourceError) as exc_info:
            view.require_string("cluster", "api")

        assert exc_info.value.actual_type == type_name
        assert type_name in str(exc_info.value)

    def test_unknown(self):
        view = AttributeView.from_mapping({}, unknown=["identifier"])

        with pytest.raises(SkipResourceError, match="but unknown"):
            view.require_string("identifier", "db")

    def test_skip_is_validation_error(self):
        with pytest.raises(ValidationError):
            AttributeView().require_string("x", "y")
