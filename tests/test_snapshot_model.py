"""Tests for the FormState snapshot."""
import dataclasses

import pytest

from formstate import FormState


def test_initial_snapshot_is_pristine():
    state = FormState.initial({"name": "x", "age": 1})

    assert dict(state.fields) == {"name": "x", "age": 1}
    assert dict(state.errors) == {"name": None, "age": None}
    assert dict(state.dirty_fields) == {"name": False, "age": False}
    assert dict(state.touched_fields) == {"name": False, "age": False}
    assert state.is_dirty is False
    assert state.is_touched is False


def test_create_copies_input_mappings():
    source = {"name": "x"}
    state = FormState.create(fields=source)
    source["name"] = "changed"
    assert state.fields["name"] == "x"


def test_snapshot_is_frozen():
    state = FormState.initial({"name": "x"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.is_valid = True
    with pytest.raises(TypeError):
        state.fields["name"] = "y"


def test_with_helpers_return_new_snapshots():
    state = FormState.initial({"name": "x"})

    dirty = state.with_dirty("name")
    assert dirty is not state
    assert dirty.dirty_fields["name"] is True and dirty.is_dirty is True
    assert state.dirty_fields["name"] is False

    touched = state.with_touched("name")
    assert touched.touched_fields["name"] is True and touched.is_touched is True

    changed = state.with_field("name", "y")
    assert changed.fields["name"] == "y"
    assert state.fields["name"] == "x"


def test_with_errors_merges():
    state = FormState.initial({"name": "", "age": 0})
    errored = state.with_errors({"name": "required", "age": "too young"})
    cleared = errored.with_error("age", None)

    assert dict(errored.errors) == {"name": "required", "age": "too young"}
    assert dict(cleared.errors) == {"name": "required", "age": None}


def test_with_validity_reuses_unchanged_snapshot():
    state = FormState.initial({"name": "x"})
    assert state.with_validity(state.is_valid) is state
    assert state.with_validity(not state.is_valid).is_valid is (not state.is_valid)


def test_to_dict():
    state = FormState.initial({"name": "x"}).with_touched("name")
    exported = state.to_dict()

    assert exported["fields"] == {"name": "x"}
    assert exported["touched_fields"] == {"name": True}
    assert exported["is_touched"] is True
    assert type(exported["fields"]) is dict


def test_equality_by_value():
    assert FormState.initial({"name": "x"}) == FormState.initial({"name": "x"})
