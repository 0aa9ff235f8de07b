"""
Per-field strategy registry.

Each field resolves to a small FieldStrategy record holding its validator,
value processor and comparator. Records are built once at construction;
fields without a registered strategy fall back to the module defaults.

A field with no validator is indistinguishable from a misconfigured one.
Both are treated as always valid.
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

FieldError = Optional[str]
Validator = Callable[[Any], FieldError]
ValueProcessor = Callable[[Any], Any]
Comparator = Callable[[Any, Any], bool]


def default_validator(value: Any) -> FieldError:
    return None


def default_value_processor(raw_value: Any) -> Any:
    """Identity; None stays None."""
    return raw_value


def default_comparator(prev: Any, next_value: Any) -> bool:
    """Two Nones are equal, otherwise identity or ==."""
    if prev is None and next_value is None:
        return True
    return prev is next_value or prev == next_value


def is_equal_error(prev_error: FieldError, next_error: FieldError) -> bool:
    """Error comparator: None equals None, everything else by ==."""
    if prev_error is None and next_error is None:
        return True
    return prev_error == next_error


@dataclass(frozen=True)
class FieldStrategy:
    """Resolved strategies for one field.

    has_validator records whether the validator was supplied by the caller;
    only those fields take part in the global validity fold.
    """
    validator: Validator = default_validator
    value_processor: ValueProcessor = default_value_processor
    comparator: Comparator = default_comparator
    has_validator: bool = False


DEFAULT_STRATEGY = FieldStrategy()


class FieldRegistry:
    """Lookup table from field name to FieldStrategy.

    Survives FormControlCore.reset(); only the field values are reinitialized.
    """

    def __init__(
        self,
        validators: Optional[Mapping[str, Validator]] = None,
        value_processors: Optional[Mapping[str, ValueProcessor]] = None,
        comparators: Optional[Mapping[str, Comparator]] = None,
    ):
        validators = dict(validators or {})
        value_processors = dict(value_processors or {})
        comparators = dict(comparators or {})

        self._strategies: Dict[str, FieldStrategy] = {}
        names = set(validators) | set(value_processors) | set(comparators)
        for name in names:
            validator = validators.get(name)
            self._strategies[name] = FieldStrategy(
                validator=validator or default_validator,
                value_processor=value_processors.get(name) or default_value_processor,
                comparator=comparators.get(name) or default_comparator,
                has_validator=validator is not None,
            )

        # Preserve caller order for the validity fold
        self._validated_fields: Tuple[str, ...] = tuple(
            name for name, validator in validators.items() if validator is not None
        )
        logger.debug(
            f"FieldRegistry: {len(self._strategies)} strategies, "
            f"{len(self._validated_fields)} validated fields"
        )

    def get_strategy(self, field_name: str) -> FieldStrategy:
        return self._strategies.get(field_name, DEFAULT_STRATEGY)

    def get_validator(self, field_name: str) -> Validator:
        return self.get_strategy(field_name).validator

    def get_value_processor(self, field_name: str) -> ValueProcessor:
        return self.get_strategy(field_name).value_processor

    def get_comparator(self, field_name: str) -> Comparator:
        return self.get_strategy(field_name).comparator

    def has_validator(self, field_name: str) -> bool:
        return self.get_strategy(field_name).has_validator

    @property
    def validated_fields(self) -> Tuple[str, ...]:
        """Names of fields with a caller-supplied validator."""
        return self._validated_fields
