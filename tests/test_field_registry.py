"""Tests for per-field strategies and their defaults."""
from formstate import (
    FieldRegistry,
    default_comparator,
    default_validator,
    default_value_processor,
    is_equal_error,
)


class TestDefaults:

    def test_default_validator_accepts_everything(self):
        assert default_validator(None) is None
        assert default_validator("") is None

    def test_default_value_processor_is_identity(self):
        marker = object()
        assert default_value_processor(marker) is marker
        assert default_value_processor(None) is None
        assert default_value_processor(0) == 0

    def test_default_comparator(self):
        data = {"a": 1}
        assert default_comparator(None, None) is True
        assert default_comparator(data, data) is True
        assert default_comparator(1, 1) is True
        assert default_comparator(None, 0) is False
        assert default_comparator("a", "b") is False

    def test_error_comparator(self):
        assert is_equal_error(None, None) is True
        assert is_equal_error("x", "x") is True
        assert is_equal_error(None, "x") is False
        assert is_equal_error("x", "y") is False


class TestFieldRegistry:

    def test_resolves_registered_strategies(self, validators, value_processors, comparators):
        registry = FieldRegistry(validators, value_processors, comparators)

        assert registry.get_validator("name") is validators["name"]
        assert registry.get_value_processor("age") is value_processors["age"]
        assert registry.get_comparator("data") is comparators["data"]

    def test_partial_registration_falls_back(self, validators, comparators):
        registry = FieldRegistry(validators, None, comparators)

        strategy = registry.get_strategy("name")
        assert strategy.validator is validators["name"]
        assert strategy.value_processor is default_value_processor
        assert registry.get_comparator("age") is default_comparator

    def test_unknown_field_uses_defaults(self):
        registry = FieldRegistry()
        assert registry.get_validator("missing") is default_validator
        assert registry.has_validator("missing") is False

    def test_validated_fields(self, validators, comparators):
        registry = FieldRegistry(validators, comparators=comparators)
        assert registry.validated_fields == ("name", "age")
        assert registry.has_validator("name") is True
        assert registry.has_validator("data") is False

    def test_none_validator_is_not_registered(self):
        registry = FieldRegistry({"name": None})
        assert registry.validated_fields == ()
        assert registry.get_validator("name") is default_validator
