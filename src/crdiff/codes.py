"""Code constants for crdiff errors and compatibility findings.

These constants prevent stringly-typed codes and ensure
client code matches on the correct values.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every CRDiffError."""

    # Input errors
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    UNREADABLE_SOURCE = "UNREADABLE_SOURCE"
    MALFORMED_DOCUMENT = "MALFORMED_DOCUMENT"
    UNRECOGNIZED_API_VERSION = "UNRECOGNIZED_API_VERSION"
    INVALID_CRD = "INVALID_CRD"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    DUPLICATE_VERSION = "DUPLICATE_VERSION"
    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"

    # Differencer / checker errors
    COMPARISON_FAILED = "COMPARISON_FAILED"


class Level(str, Enum):
    """Severity of a compatibility finding."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {Level.INFO: 1, Level.WARNING: 2, Level.ERROR: 3}


class FindingId(str, Enum):
    """Identifiers of the findings emitted by the compatibility checker."""

    NEW_REQUIRED_PROPERTY = "new-required-request-property"
    NEW_OPTIONAL_PROPERTY = "new-optional-request-property"
    PROPERTY_BECAME_REQUIRED = "request-property-became-required"
    PROPERTY_BECAME_OPTIONAL = "request-property-became-optional"
    PROPERTY_REMOVED = "request-property-removed"
    PROPERTY_TYPE_CHANGED = "request-property-type-changed"
    PROPERTY_BECAME_ENUM = "request-property-became-enum"
    PROPERTY_ENUM_VALUE_REMOVED = "request-property-enum-value-removed"
    PROPERTY_ENUM_VALUE_ADDED = "request-property-enum-value-added"
    PROPERTY_MAX_LENGTH_SET = "request-property-max-length-set"
    PROPERTY_MAX_LENGTH_DECREASED = "request-property-max-length-decreased"
    PROPERTY_MIN_LENGTH_SET = "request-property-min-length-set"
    PROPERTY_MIN_LENGTH_INCREASED = "request-property-min-length-increased"
    PROPERTY_MIN_ITEMS_SET = "request-property-min-items-set"
    PROPERTY_MIN_ITEMS_INCREASED = "request-property-min-items-increased"
    PROPERTY_MAX_ITEMS_DECREASED = "request-property-max-items-decreased"
    PROPERTY_MIN_SET = "request-property-min-set"
    PROPERTY_MIN_INCREASED = "request-property-min-increased"
    PROPERTY_MAX_SET = "request-property-max-set"
    PROPERTY_MAX_DECREASED = "request-property-max-decreased"
    PROPERTY_PATTERN_ADDED = "request-property-pattern-added"
    PROPERTY_PATTERN_CHANGED = "request-property-pattern-changed"
    PROPERTY_BECAME_NOT_NULLABLE = "request-property-became-not-nullable"
