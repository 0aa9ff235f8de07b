"""
FormState: immutable point-in-time snapshot of a form.

Design Philosophy: Correct by Construction
- Immutable snapshots (frozen dataclass, read-only mappings)
- Every mutation produces a new snapshot, never an in-place edit
- A listener holding an old snapshot never observes later changes through it
"""

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


def _frozen(mapping: Optional[Mapping]) -> Mapping:
    """Copy a mapping into a read-only view."""
    return MappingProxyType(dict(mapping or {}))


def _with_item(mapping: Mapping, key: str, value: Any) -> Mapping:
    items = dict(mapping)
    items[key] = value
    return MappingProxyType(items)


@dataclass(frozen=True)
class FormState:
    """Immutable snapshot of all observable form state.

    fields/errors/dirty_fields/touched_fields are read-only views over
    private copies. Use the ``with_*`` helpers to derive a new snapshot.
    """
    fields: Mapping[str, Any]
    errors: Mapping[str, Optional[str]]
    dirty_fields: Mapping[str, bool]
    touched_fields: Mapping[str, bool]
    is_valid: bool
    is_dirty: bool
    is_touched: bool

    @classmethod
    def create(
        cls,
        fields: Optional[Mapping[str, Any]] = None,
        errors: Optional[Mapping[str, Optional[str]]] = None,
        dirty_fields: Optional[Mapping[str, bool]] = None,
        touched_fields: Optional[Mapping[str, bool]] = None,
        is_valid: bool = False,
        is_dirty: bool = False,
        is_touched: bool = False,
    ) -> 'FormState':
        """Create a snapshot, copying every mapping passed in."""
        return cls(
            fields=_frozen(fields),
            errors=_frozen(errors),
            dirty_fields=_frozen(dirty_fields),
            touched_fields=_frozen(touched_fields),
            is_valid=is_valid,
            is_dirty=is_dirty,
            is_touched=is_touched,
        )

    @classmethod
    def initial(cls, fields: Optional[Mapping[str, Any]]) -> 'FormState':
        """Pristine snapshot: no errors, every field clean and untouched."""
        fields = dict(fields or {})
        return cls.create(
            fields=fields,
            errors={name: None for name in fields},
            dirty_fields={name: False for name in fields},
            touched_fields={name: False for name in fields},
        )

    def with_field(self, name: str, value: Any) -> 'FormState':
        return replace(self, fields=_with_item(self.fields, name, value))

    def with_error(self, name: str, error: Optional[str]) -> 'FormState':
        return replace(self, errors=_with_item(self.errors, name, error))

    def with_errors(self, errors: Mapping[str, Optional[str]]) -> 'FormState':
        """Commit several errors in one new snapshot."""
        merged = dict(self.errors)
        merged.update(errors)
        return replace(self, errors=MappingProxyType(merged))

    def with_dirty(self, name: str) -> 'FormState':
        return replace(
            self,
            dirty_fields=_with_item(self.dirty_fields, name, True),
            is_dirty=True,
        )

    def with_touched(self, name: str) -> 'FormState':
        return replace(
            self,
            touched_fields=_with_item(self.touched_fields, name, True),
            is_touched=True,
        )

    def with_validity(self, is_valid: bool) -> 'FormState':
        if is_valid == self.is_valid:
            return self
        return replace(self, is_valid=is_valid)

    def to_dict(self) -> Dict[str, Any]:
        """Export to a plain dict (mappings copied)."""
        return {
            'fields': dict(self.fields),
            'errors': dict(self.errors),
            'dirty_fields': dict(self.dirty_fields),
            'touched_fields': dict(self.touched_fields),
            'is_valid': self.is_valid,
            'is_dirty': self.is_dirty,
            'is_touched': self.is_touched,
        }
