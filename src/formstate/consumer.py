"""
Base class for subscription-based consumers with late-subscriber catch-up.

A consumer may be constructed well before its listener is registered (a UI
component built now, mounted later). Anything that changed in between would
never reach the listener, so subscribe() replays one synthetic invocation
comparing the retained snapshot with the store's current one before it
returns. The replay uses the same relevance rule as real notifications.

Consumers compare against their own retained snapshot, not the bus's prev
argument, so a catch-up followed by a real notification never applies the
same change twice.
"""
import logging
from typing import Callable, Optional, TYPE_CHECKING

from formstate.snapshot_model import FormState

if TYPE_CHECKING:
    from formstate.form_control import FormControlCore

logger = logging.getLogger(__name__)

# Update ids wrap instead of growing without bound
UPDATE_ID_MODULUS = 1_000_000


def next_update_id(update_id: int) -> int:
    return (update_id + 1) % UPDATE_ID_MODULUS


class SnapshotConsumer:
    """Listener wrapper that retains the last snapshot it acted on.

    Subclasses implement _reconcile(retained, next_state) returning True when
    the change is relevant to them. Relevant changes advance the retained
    snapshot, bump update_id and fire on_update.
    """

    def __init__(
        self,
        control: 'FormControlCore',
        on_update: Optional[Callable[[], None]] = None,
    ):
        self._control = control
        self._on_update = on_update
        self._retained: FormState = control.get_state()
        self._update_id = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def control(self) -> 'FormControlCore':
        return self._control

    @property
    def retained_state(self) -> FormState:
        """Last snapshot this consumer acted on."""
        return self._retained

    @property
    def update_id(self) -> int:
        return self._update_id

    @property
    def is_subscribed(self) -> bool:
        """False once the store has dropped the listener, e.g. after destroy()."""
        return self._unsubscribe is not None and self._control.has_listener(self._listener)

    def _reconcile(self, retained: FormState, next_state: FormState) -> bool:
        raise NotImplementedError

    def _listener(self, prev_state: FormState, next_state: FormState) -> None:
        if not self._reconcile(self._retained, next_state):
            return
        self._retained = next_state
        self._mark_updated()

    def _mark_updated(self) -> None:
        self._update_id = next_update_id(self._update_id)
        if self._on_update is not None:
            self._on_update()

    def subscribe(self) -> None:
        """Register the listener, then catch up with the current snapshot."""
        # A handle may outlive the listener when the store was destroyed
        if self.is_subscribed:
            return
        self._unsubscribe = self._control.subscribe(self._listener)

        current = self._control.get_state()
        if current is not self._retained:
            logger.debug(f"{type(self).__name__}: catching up with state changed before subscribe")
        self._listener(self._retained, current)

    def unsubscribe(self) -> None:
        """Deregister the listener. Safe to call more than once."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None

    def __enter__(self):
        self.subscribe()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False
