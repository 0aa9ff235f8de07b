"""
Framework-agnostic form consumers.

FieldSubscriber: one field plus optional watched fields. Calls on_update
only when that field's value/error/dirty/touched state changes, or when the
watched view changes.

FormSubscription: owns a FormControlCore and calls on_update only when the
global flags (is_valid, is_dirty, is_touched) change.

"on_update" is whatever the host uses to re-render: a widget refresh, a
redraw request, or nothing at all.
"""
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from formstate.consumer import SnapshotConsumer
from formstate.field_registry import Comparator, FieldError, Validator, ValueProcessor
from formstate.form_control import FormControlCore
from formstate.snapshot_model import FormState
from formstate.watcher import FieldWatcher, WatchedView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldProps:
    """Everything a field renderer needs, captured at one point in time."""
    value: Any
    error: FieldError
    is_dirty: bool
    is_touched: bool
    on_change: Callable[[Any], None]
    on_touched: Callable[[], None]
    on_blur: Callable[[], None]
    register: Callable[[], Dict[str, Any]]
    watched_fields: WatchedView


class FieldSubscriber(SnapshotConsumer):
    """Field-level consumer of a FormControlCore."""

    def __init__(
        self,
        control: FormControlCore,
        field_name: str,
        watched_field_names: Optional[Sequence[str]] = None,
        on_update: Optional[Callable[[], None]] = None,
    ):
        super().__init__(control, on_update=on_update)
        self._field_name = field_name
        self._watcher = FieldWatcher(
            control,
            watched_field_names,
            field_name=field_name,
            on_change=self._mark_updated,
        )

    @property
    def field_name(self) -> str:
        return self._field_name

    @property
    def watcher(self) -> FieldWatcher:
        return self._watcher

    def _reconcile(self, retained: FormState, next_state: FormState) -> bool:
        return not self._control.is_field_states_equal(self._field_name, retained, next_state)

    def subscribe(self) -> None:
        super().subscribe()
        self._watcher.subscribe()

    def unsubscribe(self) -> None:
        self._watcher.unsubscribe()
        super().unsubscribe()

    # ========== READS ==========

    @property
    def value(self) -> Any:
        return self._control.get_field(self._field_name)

    @property
    def error(self) -> FieldError:
        return self._control.get_error(self._field_name)

    @property
    def is_dirty(self) -> bool:
        return self._control.get_dirty_field(self._field_name)

    @property
    def is_touched(self) -> bool:
        return self._control.get_touched_field(self._field_name)

    @property
    def watched_fields(self) -> WatchedView:
        return self._watcher.view

    # ========== HANDLERS ==========

    def on_change(self, raw_value: Any) -> None:
        self._control.update_field(self._field_name, raw_value, notify=True)

    def on_touched(self) -> None:
        self._control.update_touched_field(self._field_name, notify=True)

    def on_blur(self) -> None:
        self._control.update_touched_field(self._field_name, notify=True)

    def register(self) -> Dict[str, Any]:
        """Minimal binding for an input element: value, on_change, on_blur."""
        return {
            'value': self.value,
            'on_change': self.on_change,
            'on_blur': self.on_blur,
        }

    def props(self) -> FieldProps:
        return FieldProps(
            value=self.value,
            error=self.error,
            is_dirty=self.is_dirty,
            is_touched=self.is_touched,
            on_change=self.on_change,
            on_touched=self.on_touched,
            on_blur=self.on_blur,
            register=self.register,
            watched_fields=self.watched_fields,
        )


class FormSubscription(SnapshotConsumer):
    """Form-level consumer that owns its FormControlCore.

    Example:
        with FormSubscription({'name': ''}, on_update=refresh) as form:
            name = form.field('name', on_update=refresh_name)
            name.subscribe()
            form.on_change('name')('Ada')
            if form.is_valid:
                submit(form.get_fields())
    """

    def __init__(
        self,
        fields: Optional[Mapping[str, Any]],
        validators: Optional[Mapping[str, Validator]] = None,
        value_processors: Optional[Mapping[str, ValueProcessor]] = None,
        comparators: Optional[Mapping[str, Comparator]] = None,
        on_update: Optional[Callable[[], None]] = None,
    ):
        control = FormControlCore(fields, validators, value_processors, comparators)
        super().__init__(control, on_update=on_update)

    def _reconcile(self, retained: FormState, next_state: FormState) -> bool:
        return not self._control.is_global_states_equal(retained, next_state)

    def destroy(self) -> None:
        """Unsubscribe and drop every listener on the owned store."""
        self.unsubscribe()
        self._control.destroy()

    def __exit__(self, exc_type, exc, tb):
        self.destroy()
        return False

    def field(
        self,
        field_name: str,
        watched_field_names: Optional[Sequence[str]] = None,
        on_update: Optional[Callable[[], None]] = None,
    ) -> FieldSubscriber:
        """Build a FieldSubscriber bound to this form's store (not yet subscribed)."""
        return FieldSubscriber(self._control, field_name, watched_field_names, on_update)

    # ========== GLOBAL FLAGS ==========

    @property
    def is_valid(self) -> bool:
        return self._control.is_valid

    @property
    def is_dirty(self) -> bool:
        return self._control.is_dirty

    @property
    def is_touched(self) -> bool:
        return self._control.is_touched

    # ========== HANDLER FACTORIES ==========

    def on_change(self, field_name: str) -> Callable[[Any], None]:
        def handler(raw_value: Any) -> None:
            self._control.update_field(field_name, raw_value, notify=True)
        return handler

    def on_touched(self, field_name: str) -> Callable[[], None]:
        def handler() -> None:
            self._control.update_touched_field(field_name, notify=True)
        return handler

    def on_blur(self, field_name: str) -> Callable[[], None]:
        def handler() -> None:
            self._control.update_touched_field(field_name, notify=True)
        return handler

    # ========== READS ==========

    def get_fields(self) -> Mapping[str, Any]:
        return self._control.get_state().fields

    def get_errors(self) -> Mapping[str, FieldError]:
        return self._control.get_state().errors

    def get_dirty_fields(self) -> Mapping[str, bool]:
        return self._control.get_state().dirty_fields

    def get_touched_fields(self) -> Mapping[str, bool]:
        return self._control.get_state().touched_fields

    def get_field(self, field_name: str) -> Any:
        return self._control.get_field(field_name)

    def get_error(self, field_name: str) -> FieldError:
        return self._control.get_error(field_name)

    def get_dirty_field(self, field_name: str) -> bool:
        return self._control.get_dirty_field(field_name)

    def get_touched_field(self, field_name: str) -> bool:
        return self._control.get_touched_field(field_name)

    def reset(self, next_fields: Optional[Mapping[str, Any]] = None) -> None:
        logger.debug(f"FormSubscription reset requested (replace_fields={next_fields is not None})")
        self._control.reset(next_fields)
