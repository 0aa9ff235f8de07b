"""
FormControlCore: the form state store.

Holds the current FormState snapshot, the per-field strategy registry and the
subscription bus. Every mutator computes a new snapshot, commits it, and
(when asked to) notifies listeners with (prev_snapshot, next_snapshot).

Lifecycle:
- Registry, store and bus are created together at construction
- reset() reinitializes the snapshot, keeping the registry and listeners
- destroy() drops every listener

Error handling: validators return an error string or None. Exceptions raised
by caller-supplied validators, processors, comparators or listeners are not
caught here; they propagate to whoever triggered the mutation.

Thread safety: Not thread-safe. Mutating the store from inside one of its own
notifications raises ReentrantMutationError.
"""
import logging
from typing import Any, Callable, Mapping, Optional, Tuple

from formstate import config
from formstate.exceptions import ReentrantMutationError
from formstate.field_registry import (
    Comparator,
    FieldError,
    FieldRegistry,
    Validator,
    ValueProcessor,
    is_equal_error,
)
from formstate.snapshot_model import FormState
from formstate.subscription import FormListener, SubscriptionBus, Unsubscribe

logger = logging.getLogger(__name__)


class FormControlCore:
    """In-memory form state container with fine-grained subscription support.

    Example:
        control = FormControlCore(
            {'name': '', 'age': 20},
            validators={'age': lambda v: None if v > 0 else 'Age is required'},
            value_processors={'name': str.strip},
        )
        unsubscribe = control.subscribe(lambda prev, nxt: print(nxt.fields))
        control.update_field('name', '  Ada  ', notify=True)
    """

    def __init__(
        self,
        fields: Optional[Mapping[str, Any]],
        validators: Optional[Mapping[str, Validator]] = None,
        value_processors: Optional[Mapping[str, ValueProcessor]] = None,
        comparators: Optional[Mapping[str, Comparator]] = None,
    ):
        self._registry = FieldRegistry(validators, value_processors, comparators)
        self._bus = SubscriptionBus()
        self._notifying = False
        self._state: FormState
        self._initialize(fields)
        logger.debug(
            f"FormControlCore created: fields={list(self._state.fields)}, "
            f"is_valid={self._state.is_valid}"
        )

    def _initialize(self, fields: Optional[Mapping[str, Any]]) -> None:
        """Fresh snapshot from fields, then one full validation pass."""
        self._state = FormState.initial(fields)
        self._update_errors(notify=False)
        self._validate()

    # ========== SNAPSHOT AND SUBSCRIPTION ==========

    def get_state(self) -> FormState:
        """Current snapshot. Immutable, so safe to hold across mutations."""
        return self._state

    def subscribe(self, listener: FormListener) -> Unsubscribe:
        """Register a (prev, next) listener; returns an idempotent unsubscribe."""
        return self._bus.subscribe(listener)

    def destroy(self) -> None:
        """Drop every listener. The store stays readable."""
        logger.debug(f"FormControlCore destroyed ({len(self._bus)} listeners dropped)")
        self._bus.clear()

    @property
    def listener_count(self) -> int:
        return len(self._bus)

    def has_listener(self, listener: FormListener) -> bool:
        """True while listener is registered (false again after destroy())."""
        return listener in self._bus

    def _notify(self, prev_state: FormState, next_state: FormState) -> None:
        if config.get_debug_notifications():
            changed = [
                name for name in next_state.fields
                if not self.is_field_states_equal(name, prev_state, next_state)
            ]
            logger.debug(
                f"Notify {len(self._bus)} listeners: changed_fields={changed}, "
                f"is_valid={next_state.is_valid}, is_dirty={next_state.is_dirty}, "
                f"is_touched={next_state.is_touched}"
            )
        self._notifying = True
        try:
            self._bus.notify(prev_state, next_state)
        finally:
            self._notifying = False

    def _warn_unknown_field(self, operation: str, field_name: str) -> None:
        if field_name not in self._state.fields and config.get_diagnostics_enabled():
            logger.warning(
                f"{operation}: '{field_name}' is not one of the form's fields "
                f"{list(self._state.fields)}"
            )

    def _guard_reentry(self, operation: str) -> None:
        if self._notifying:
            raise ReentrantMutationError(
                f"{operation}() called while listeners are being notified; "
                f"mutate the form outside of listener callbacks"
            )

    # ========== STRATEGIES ==========

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    def get_validator(self, field_name: str) -> Validator:
        return self._registry.get_validator(field_name)

    def get_value_processor(self, field_name: str) -> ValueProcessor:
        return self._registry.get_value_processor(field_name)

    def get_comparator(self, field_name: str) -> Comparator:
        return self._registry.get_comparator(field_name)

    def get_error_comparator(self) -> Callable[[FieldError, FieldError], bool]:
        return is_equal_error

    # ========== POINT READS ==========

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._state.fields)

    @property
    def is_valid(self) -> bool:
        return self._state.is_valid

    @property
    def is_dirty(self) -> bool:
        return self._state.is_dirty

    @property
    def is_touched(self) -> bool:
        return self._state.is_touched

    def select_field(self, state: FormState, field_name: str) -> Any:
        """Read a field from any snapshot.

        An unset (None) value falls back to the field's processor applied to None.
        """
        value = state.fields.get(field_name)
        if value is None:
            return self.get_value_processor(field_name)(None)
        return value

    def get_field(self, field_name: str) -> Any:
        return self.select_field(self._state, field_name)

    def get_error(self, field_name: str) -> FieldError:
        return self._state.errors.get(field_name)

    def get_dirty_field(self, field_name: str) -> bool:
        return self._state.dirty_fields.get(field_name, False)

    def get_touched_field(self, field_name: str) -> bool:
        return self._state.touched_fields.get(field_name, False)

    # ========== VALIDATION ==========

    def _next_error(self, field_name: str, value: Any) -> FieldError:
        return self.get_validator(field_name)(value)

    def _validate(self) -> bool:
        """Fold every registered validator over current values into is_valid."""
        is_valid = True
        for field_name in self._registry.validated_fields:
            if self._next_error(field_name, self.get_field(field_name)) is not None:
                is_valid = False
                break
        self._state = self._state.with_validity(is_valid)
        return is_valid

    # ========== MUTATORS ==========

    def update_touched_field(self, field_name: str, notify: bool = False) -> None:
        """Mark a field touched. No-op when it already is."""
        self._guard_reentry('update_touched_field')
        self._warn_unknown_field('update_touched_field', field_name)
        self._mark_touched(field_name, notify)

    def update_dirty_field(self, field_name: str, notify: bool = False) -> None:
        """Mark a field dirty, touching it first. No-op when already dirty."""
        self._guard_reentry('update_dirty_field')
        self._warn_unknown_field('update_dirty_field', field_name)
        self._mark_dirty(field_name, notify)

    def _mark_touched(self, field_name: str, notify: bool) -> None:
        if self.get_touched_field(field_name):
            return

        prev_state = self._state
        self._state = self._state.with_touched(field_name)

        if notify:
            self._notify(prev_state, self._state)

    def _mark_dirty(self, field_name: str, notify: bool) -> None:
        if self.get_dirty_field(field_name):
            return

        prev_state = self._state
        self._mark_touched(field_name, notify=False)
        self._state = self._state.with_dirty(field_name)

        if notify:
            self._notify(prev_state, self._state)

    def update_error(self, field_name: str, next_value: Any, notify: bool = False) -> None:
        """Validate next_value for field_name and commit the error if it changed."""
        self._guard_reentry('update_error')
        prev_error = self.get_error(field_name)
        next_error = self._next_error(field_name, next_value)

        if self.get_error_comparator()(prev_error, next_error):
            return

        prev_state = self._state
        self._state = self._state.with_error(field_name, next_error)

        if notify:
            self._notify(prev_state, self._state)

    def update_field(self, field_name: str, raw_value: Any, notify: bool = False) -> None:
        """Process raw_value and commit it if the comparator sees a change.

        A change marks the field dirty and touched, refreshes its error and the
        global validity, and notifies once when notify is True. Values the
        comparator considers equal leave the store untouched.
        """
        self._guard_reentry('update_field')
        self._warn_unknown_field('update_field', field_name)

        prev_value = self.get_field(field_name)
        next_value = self.get_value_processor(field_name)(raw_value)

        if self.get_comparator(field_name)(prev_value, next_value):
            return

        prev_state = self._state

        self._mark_dirty(field_name, notify=False)
        self.update_error(field_name, next_value, notify=False)
        self._state = self._state.with_field(field_name, next_value)
        self._validate()

        if notify:
            self._notify(prev_state, self._state)

    def update_errors(self, notify: bool = False) -> None:
        """Re-validate every registered field and commit all changes at once."""
        self._guard_reentry('update_errors')
        self._update_errors(notify)

    def _update_errors(self, notify: bool) -> None:
        error_comparator = self.get_error_comparator()
        changed_errors = {}
        for field_name in self._registry.validated_fields:
            prev_error = self.get_error(field_name)
            next_error = self._next_error(field_name, self.get_field(field_name))
            if not error_comparator(prev_error, next_error):
                changed_errors[field_name] = next_error

        if not changed_errors:
            return

        prev_state = self._state
        self._state = self._state.with_errors(changed_errors)

        if notify:
            self._notify(prev_state, self._state)

    def reset(self, next_fields: Optional[Mapping[str, Any]] = None) -> None:
        """Reinitialize values, clear dirty/touched, re-validate, notify once.

        Without next_fields the current values are kept as the new baseline.
        """
        self._guard_reentry('reset')
        prev_state = self._state

        self._initialize(next_fields if next_fields is not None else prev_state.fields)
        logger.debug(f"FormControlCore reset: fields={list(self._state.fields)}")

        self._notify(prev_state, self._state)

    # ========== SNAPSHOT COMPARISON ==========

    def is_field_states_equal(
        self,
        field_name: str,
        prev_state: FormState,
        next_state: FormState,
    ) -> bool:
        """True when value, error, dirty and touched are all unchanged for a field.

        This is the predicate a field consumer uses to decide whether to re-render.
        """
        comparator = self.get_comparator(field_name)
        error_comparator = self.get_error_comparator()

        return bool(
            comparator(prev_state.fields.get(field_name), next_state.fields.get(field_name))
            and error_comparator(prev_state.errors.get(field_name), next_state.errors.get(field_name))
            and prev_state.dirty_fields.get(field_name, False) == next_state.dirty_fields.get(field_name, False)
            and prev_state.touched_fields.get(field_name, False) == next_state.touched_fields.get(field_name, False)
        )

    def is_global_states_equal(self, prev_state: FormState, next_state: FormState) -> bool:
        """True when is_valid, is_dirty and is_touched are all unchanged."""
        return (
            prev_state.is_valid == next_state.is_valid
            and prev_state.is_dirty == next_state.is_dirty
            and prev_state.is_touched == next_state.is_touched
        )
