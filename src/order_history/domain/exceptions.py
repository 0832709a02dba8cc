"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.
Store failures additionally carry a ``kind`` so callers can pick a retry
policy without matching on class names.
"""

from __future__ import annotations

from enum import Enum


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A value or invariant was violated."""


class EncodingError(DomainException):
    """Line items or an address could not be serialized (or read back)."""


class StoreErrorKind(Enum):
    UNAVAILABLE = "UNAVAILABLE"
    SCHEMA = "SCHEMA"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID = "INVALID"
    INTERNAL = "INTERNAL"


class StoreError(DomainException):
    """The order store could not complete an operation."""

    kind: StoreErrorKind = StoreErrorKind.INTERNAL

    @property
    def retryable(self) -> bool:
        return self.kind is StoreErrorKind.UNAVAILABLE


class StoreConnectionError(StoreError):
    """The backing database could not be opened or reached at startup."""

    kind = StoreErrorKind.UNAVAILABLE


class StoreUnavailableError(StoreError):
    """Connectivity to the backing database was lost during a call."""

    kind = StoreErrorKind.UNAVAILABLE


class SchemaError(StoreError):
    """Schema bootstrap failed."""

    kind = StoreErrorKind.SCHEMA


class DuplicateKeyError(StoreError):
    """An order with the same id has already been persisted."""

    kind = StoreErrorKind.DUPLICATE_KEY

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order '{order_id}' already exists")
        self.order_id = order_id


class InvalidRecordError(StoreError, ValidationError):
    """A required record field was empty."""

    kind = StoreErrorKind.INVALID

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Order record field '{field_name}' is required")
        self.field_name = field_name
