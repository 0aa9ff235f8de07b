"""
Framework-agnostic form state with fine-grained subscription.

This package holds form data in memory and notifies consumers only when the
part of the state they care about changes, so UIs with many independent
fields do not re-render every consumer on every keystroke.

Key Features:
- Immutable snapshots for every committed mutation
- Per-field validators, value processors and comparators with defaults
- Comparator-driven change detection (no-op updates notify nobody)
- Watched-field views with referential stability
- Late-subscriber catch-up at registration time

Quick Start:
    >>> from formstate import FormControlCore, FieldSubscriber
    >>>
    >>> control = FormControlCore(
    ...     {'name': '', 'age': 20},
    ...     validators={'age': lambda v: None if v > 0 else 'Age is required'},
    ...     value_processors={'name': str.strip},
    ... )
    >>> name = FieldSubscriber(control, 'name', watched_field_names=['age'],
    ...                        on_update=lambda: print('render name'))
    >>> name.subscribe()
    >>> name.on_change('  Ada  ')
    render name
    >>> control.get_field('name')
    'Ada'

Architecture:
    input -> FormControlCore mutator -> new FormState -> SubscriptionBus
          -> each listener decides relevance via comparators
          -> WatchedFieldsCell recomputes or reuses its view

Modules:
    - field_registry: per-field strategies and their defaults
    - snapshot_model: immutable FormState snapshot
    - subscription: listener registry (broadcast bus)
    - form_control: FormControlCore state store
    - consumer: retained-snapshot consumers with catch-up
    - watcher: watched-field memo cell and FieldWatcher
    - subscriber: FieldSubscriber and FormSubscription
    - config: diagnostics and debug logging switches
"""

# Strategies
from formstate.field_registry import (
    FieldRegistry,
    FieldStrategy,
    default_comparator,
    default_validator,
    default_value_processor,
    is_equal_error,
)

# Snapshot
from formstate.snapshot_model import FormState

# Bus
from formstate.subscription import SubscriptionBus

# Store
from formstate.form_control import FormControlCore

# Consumers
from formstate.consumer import SnapshotConsumer, UPDATE_ID_MODULUS
from formstate.watcher import WatchedFieldsCell, FieldWatcher
from formstate.subscriber import FieldProps, FieldSubscriber, FormSubscription

# Configuration
from formstate.config import (
    set_diagnostics_enabled,
    get_diagnostics_enabled,
    set_debug_notifications,
    get_debug_notifications,
)

# Errors
from formstate.exceptions import FormStateError, ReentrantMutationError

__all__ = [
    # Strategies
    'FieldRegistry',
    'FieldStrategy',
    'default_comparator',
    'default_validator',
    'default_value_processor',
    'is_equal_error',
    # Snapshot
    'FormState',
    # Bus
    'SubscriptionBus',
    # Store
    'FormControlCore',
    # Consumers
    'SnapshotConsumer',
    'UPDATE_ID_MODULUS',
    'WatchedFieldsCell',
    'FieldWatcher',
    'FieldProps',
    'FieldSubscriber',
    'FormSubscription',
    # Configuration
    'set_diagnostics_enabled',
    'get_diagnostics_enabled',
    'set_debug_notifications',
    'get_debug_notifications',
    # Errors
    'FormStateError',
    'ReentrantMutationError',
]

__version__ = '1.0.0'
__description__ = 'Framework-agnostic form state with fine-grained subscription'
