"""
Subscription bus: broadcast (prev, next) snapshots to every listener.

The bus does no filtering. Each listener decides relevance itself using the
store's comparators.

Thread safety: Not thread-safe (all operations expected on one thread).
"""
import logging
from typing import Callable, Dict, Iterator

from formstate.snapshot_model import FormState

logger = logging.getLogger(__name__)

FormListener = Callable[[FormState, FormState], None]
Unsubscribe = Callable[[], None]


class SubscriptionBus:
    """Identity-keyed listener registry owned by a single store.

    A dict is used as an ordered set so that registering the same listener
    twice keeps one entry. Callers must not depend on listener order.
    """

    def __init__(self):
        self._listeners: Dict[FormListener, None] = {}

    def subscribe(self, listener: FormListener) -> Unsubscribe:
        """Register a listener and return an idempotent unsubscribe callable."""
        self._listeners[listener] = None
        logger.debug(f"Subscribed listener: {listener!r} (total={len(self._listeners)})")

        def unsubscribe() -> None:
            if listener in self._listeners:
                del self._listeners[listener]
                logger.debug(f"Unsubscribed listener: {listener!r}")

        return unsubscribe

    def notify(self, prev_state: FormState, next_state: FormState) -> None:
        """Invoke every currently-registered listener.

        Iterates over a copy so listeners may unsubscribe during notification;
        a listener removed earlier in the same pass is skipped. Listener
        exceptions propagate to the mutating caller.
        """
        for listener in list(self._listeners):
            if listener in self._listeners:
                listener(prev_state, next_state)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def __iter__(self) -> Iterator[FormListener]:
        return iter(list(self._listeners))
