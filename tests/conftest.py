"""Pytest configuration and shared fixtures."""
import pytest

from formstate import FormControlCore
import formstate.config as config_module


def _name_validator(value):
    return None if len(value) > 0 else "Name is required"


def _age_validator(value):
    return None if value > 0 else "Age is required"


def _age_processor(value):
    return value if value > 0 else 0


def _data_comparator(prev, next_value):
    return prev["key"] == next_value["key"] and prev["value"] == next_value["value"]


@pytest.fixture(autouse=True)
def reset_config():
    """Restore module-level configuration after each test."""
    original_diagnostics = config_module._diagnostics_enabled
    original_debug = config_module._debug_notifications

    config_module._diagnostics_enabled = True

    yield

    config_module._diagnostics_enabled = original_diagnostics
    config_module._debug_notifications = original_debug


@pytest.fixture
def fields():
    return {
        "name": "name",
        "age": 20,
        "address": "address",
        "data": {"key": "key", "value": "value"},
    }


@pytest.fixture
def validators():
    return {"name": _name_validator, "age": _age_validator}


@pytest.fixture
def value_processors():
    return {"name": str.strip, "age": _age_processor}


@pytest.fixture
def comparators():
    return {
        "name": lambda prev, next_value: prev == next_value,
        "data": _data_comparator,
    }


@pytest.fixture
def control(fields, validators, value_processors, comparators):
    """Fresh store built from the shared dataset."""
    return FormControlCore(fields, validators, value_processors, comparators)


@pytest.fixture
def recorder():
    """Listener that records every (prev, next) pair it receives."""
    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, prev_state, next_state):
            self.calls.append((prev_state, next_state))

    return Recorder()
