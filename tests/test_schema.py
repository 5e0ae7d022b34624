import pytest

from scrape_it import ConfigurationError, FieldDescriptor, FieldKind, normalize_field
from scrape_it.errors import INVALID_FIELD, UNKNOWN_ACCESSOR
from scrape_it.schema import AttributeAccessor, BuiltinAccessor, CustomAccessor, item_descriptor


class TestNormalizeField:
    """Test suite for raw field normalization."""

    def test_string_becomes_selector(self):
        descriptor = normalize_field("h1", "title")

        assert descriptor.name == "title"
        assert descriptor.selector == "h1"
        assert descriptor.list_item is None
        assert descriptor.data == {}
        assert descriptor.how == "text"
        assert descriptor.trim_value is True
        assert descriptor.closest == ""
        assert descriptor.eq is None
        assert descriptor.texteq is None
        assert descriptor.convert is None

    def test_camel_case_and_python_names(self):
        camel = normalize_field({"listItem": "li", "trimValue": False})
        snake = normalize_field({"list_item": "li", "trim_value": False})
        short = normalize_field({"listItem": "li", "trim": False})

        for descriptor in (camel, snake, short):
            assert descriptor.list_item == "li"
            assert descriptor.trim_value is False

    def test_explicit_how_wins_over_default(self):
        descriptor = normalize_field({"selector": "div", "how": "html"})
        assert descriptor.accessor == BuiltinAccessor("html")

    def test_attr_wins_over_explicit_how(self):
        descriptor = normalize_field({"selector": "a", "how": "html", "attr": "href"})
        assert descriptor.accessor == AttributeAccessor("href")

    def test_callable_how(self):
        func = lambda selection: "x"  # noqa: E731
        descriptor = normalize_field({"selector": "a", "how": func})
        assert descriptor.accessor == CustomAccessor(func)

    def test_none_values_fall_back_to_defaults(self):
        descriptor = normalize_field({"selector": "p", "how": None, "trimValue": None})
        assert descriptor.how == "text"
        assert descriptor.trim_value is True

    def test_raw_mapping_is_not_modified(self):
        raw = {"listItem": "li"}
        normalize_field(raw, "items")
        assert raw == {"listItem": "li"}

    def test_descriptor_is_copied_with_name(self):
        original = FieldDescriptor(selector="p")
        descriptor = normalize_field(original, "para")

        assert descriptor.name == "para"
        assert original.name == ""

    def test_field_kinds(self):
        assert normalize_field("p").kind is FieldKind.SCALAR
        assert normalize_field({"selector": "p", "data": {"a": "b"}}).kind is FieldKind.NESTED
        assert normalize_field({"listItem": "li"}).kind is FieldKind.SCALAR_LIST
        assert normalize_field({"listItem": "li", "data": {"a": "b"}}).kind is FieldKind.LIST
        assert item_descriptor().kind is FieldKind.SCALAR


class TestNormalizeFieldErrors:
    """Malformed field definitions."""

    def test_unknown_accessor(self):
        with pytest.raises(ConfigurationError) as excinfo:
            normalize_field({"selector": "p", "how": "innerText"}, "para")
        assert excinfo.value.code == UNKNOWN_ACCESSOR

    def test_unknown_accessor_ignored_with_attr(self):
        descriptor = normalize_field({"selector": "p", "how": "innerText", "attr": "id"})
        assert descriptor.accessor == AttributeAccessor("id")

    def test_wrong_definition_type(self):
        with pytest.raises(ConfigurationError) as excinfo:
            normalize_field(42, "answer")
        assert excinfo.value.code == INVALID_FIELD

    def test_negative_texteq(self):
        with pytest.raises(ConfigurationError) as excinfo:
            normalize_field({"selector": "p", "texteq": -1}, "para")
        assert excinfo.value.code == INVALID_FIELD

    def test_unknown_how_ignored_on_nested_field(self):
        descriptor = normalize_field({"selector": "div", "how": "innerText", "data": {"p": "p"}}, "box")
        assert descriptor.kind is FieldKind.NESTED

    def test_unknown_how_ignored_on_list_field(self):
        descriptor = normalize_field({"listItem": "li", "how": "innerText", "data": {"a": "a"}}, "links")
        assert descriptor.kind is FieldKind.LIST
