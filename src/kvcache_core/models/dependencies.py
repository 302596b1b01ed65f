"""Write dependency descriptor and validation callback models."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kvcache_core.constants import ITEMS


@dataclass(frozen=True)
class ValidationCallback:
    """A stored (callable, args) pair re-evaluated on every read.

    The callable is pickled into the envelope by reference, so it must be
    importable at module level (no lambdas or closures).
    """

    func: Callable[..., Any]
    args: tuple[Any, ...] = field(default=())

    def is_valid(self) -> bool:
        """Invoke the callable with its stored arguments."""
        return bool(self.func(*self.args))


def _to_callback(value: Any) -> ValidationCallback:  # noqa: ANN401
    """Accept a ValidationCallback, a bare callable, or a (callable, args) pair."""
    if isinstance(value, ValidationCallback):
        return value
    if callable(value):
        return ValidationCallback(value)
    if isinstance(value, Sequence) and value and callable(value[0]):
        if len(value) < 2:
            return ValidationCallback(value[0])
        args = value[1]
        # a lone string is one argument, not a sequence of characters
        if isinstance(args, (str, bytes)):
            return ValidationCallback(value[0], (args,))
        return ValidationCallback(value[0], tuple(args))
    msg = f"Invalid validation callback: {value!r}"
    raise ValueError(msg)


class Dependencies(BaseModel):
    """Dependency descriptor passed to CacheStorage.write.

    Every field is optional; presence is checked with ``is not None`` so an
    explicitly empty value (e.g. ``callbacks=[]``) is still honoured.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    expiration: int | None = Field(
        default=None, ge=0, description="TTL in seconds from now (0 = never expire)"
    )
    sliding: bool = Field(
        default=False, description="Renew the expiration window on every read"
    )
    callbacks: list[ValidationCallback] | None = Field(
        default=None, description="Callbacks that must all return true for the entry to be valid"
    )
    tags: list[str] | None = Field(default=None, description="Labels for bulk invalidation")
    priority: int | None = Field(default=None, description="Weight for bulk invalidation")
    items: list[str] | None = Field(
        default=None, description="Dependent cache keys (not supported by this storage)"
    )

    @field_validator("expiration", mode="before")
    @classmethod
    def _coerce_expiration(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, timedelta):
            return int(value.total_seconds())
        return value

    @field_validator("callbacks", mode="before")
    @classmethod
    def _coerce_callbacks(cls, value: Any) -> Any:  # noqa: ANN401
        if value is None:
            return None
        return [_to_callback(item) for item in value]

    @field_validator("tags", "items", mode="before")
    @classmethod
    def _wrap_single_string(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return [value]
        return value

    @property
    def is_indexed(self) -> bool:
        """Whether the journal must index this entry (tags or priority set)."""
        return self.tags is not None or self.priority is not None

    @classmethod
    def from_descriptor(cls, descriptor: Dependencies | Mapping[str, Any] | None) -> Dependencies:
        """Normalize a mapping or None into a Dependencies instance."""
        if descriptor is None:
            return cls()
        if isinstance(descriptor, cls):
            return descriptor
        return cls.model_validate(dict(descriptor))

    @staticmethod
    def requests_items(descriptor: Dependencies | Mapping[str, Any] | None) -> bool:
        """Whether a raw descriptor asks for dependent items.

        Checked on the raw mapping so the answer does not depend on the
        other fields being valid.
        """
        if descriptor is None:
            return False
        if isinstance(descriptor, Dependencies):
            return descriptor.items is not None
        return descriptor.get(ITEMS) is not None
