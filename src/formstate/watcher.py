"""
Watched-field selectors with referential stability.

A consumer can watch a set of fields other than its own. The derived view
(watched name -> current value) keeps the same object identity for as long as
every watched field compares equal under its comparator, so consumers that
gate recomputation on identity skip work when nothing they watch changed.
"""
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

from formstate import config
from formstate.consumer import SnapshotConsumer
from formstate.snapshot_model import FormState

if TYPE_CHECKING:
    from formstate.form_control import FormControlCore

logger = logging.getLogger(__name__)

WatchedView = Optional[Mapping[str, Any]]


class WatchedFieldsCell:
    """Memo cell holding (last input snapshot, last derived view).

    Recomputation is decided by the watched fields' comparators only, never
    by snapshot identity.

    Example:
        cell = WatchedFieldsCell(control, ['name'])
        first = cell.select(control.get_state())
        control.update_field('age', 30)
        assert cell.select(control.get_state()) is first
    """

    def __init__(self, control: 'FormControlCore', watched_field_names: Optional[Sequence[str]]):
        self._control = control
        self._names: Tuple[str, ...] = tuple(watched_field_names or ())
        self._inputs: Optional[FormState] = None
        self._view: WatchedView = None

    @property
    def watched_field_names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def inputs(self) -> Optional[FormState]:
        return self._inputs

    def _inputs_equal(self, prev_state: FormState, next_state: FormState) -> bool:
        for name in self._names:
            comparator = self._control.get_comparator(name)
            if not comparator(prev_state.fields.get(name), next_state.fields.get(name)):
                return False
        return True

    def select(self, state: FormState) -> WatchedView:
        """Derived view for state; the cached object when nothing watched changed."""
        if not self._names:
            return None

        if self._inputs is not None and self._inputs_equal(self._inputs, state):
            return self._view

        self._inputs = state
        self._view = MappingProxyType({
            name: self._control.select_field(state, name) for name in self._names
        })
        return self._view

    def invalidate(self) -> None:
        """Forget the cached view; the next select() builds a new one."""
        self._inputs = None
        self._view = None


class FieldWatcher(SnapshotConsumer):
    """Subscribes to a store and tracks the derived view of watched fields.

    on_change fires only when the view reference changes. With no watched
    fields the view is always None and subscribe() registers nothing.
    """

    def __init__(
        self,
        control: 'FormControlCore',
        watched_field_names: Optional[Sequence[str]],
        field_name: Optional[str] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        super().__init__(control, on_update=on_change)
        self._field_name = field_name
        self._cell = WatchedFieldsCell(control, watched_field_names)

        if (
            field_name is not None
            and field_name in self._cell.watched_field_names
            and config.get_diagnostics_enabled()
        ):
            logger.warning(
                f"FieldWatcher: watched_field_names may only contain fields other than "
                f"'{field_name}'; got {list(self._cell.watched_field_names)}"
            )

        self._view: WatchedView = self._cell.select(self._retained)

    @property
    def field_name(self) -> Optional[str]:
        return self._field_name

    @property
    def watched_field_names(self) -> Tuple[str, ...]:
        return self._cell.watched_field_names

    @property
    def view(self) -> WatchedView:
        """Current derived view; same object until a watched field changes."""
        return self._view

    def _reconcile(self, retained: FormState, next_state: FormState) -> bool:
        view = self._cell.select(next_state)
        if view is self._view:
            return False
        self._view = view
        return True

    def subscribe(self) -> None:
        if not self._cell.watched_field_names:
            return
        super().subscribe()
