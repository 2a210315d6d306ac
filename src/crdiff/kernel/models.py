"""Result models of a CRD comparison.

Serialization uses the field names of the report format (``generalChanges``,
``added``, ``deleted``, ``changed``, ``schemaChanges``, ``breakingChanges``)
and leaves out absent or empty members.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from crdiff.codes import Level
from crdiff.kernel.schema_diff import DiffModel, SchemaDiff


class Change(DiffModel):
    """A general (non-schema) change of a CRD."""
    breaking: bool
    description: Optional[str] = None


class BreakingChange(DiffModel):
    """A compatibility finding attached to one version."""
    id: str
    level: Level
    details: Dict[str, Any]
    message: Optional[str] = None


class CRDSchemaDiff(DiffModel):
    """Changes recorded at one canonical schema path."""
    added_properties: List[str] = Field(default_factory=list, alias="added")
    deleted_properties: List[str] = Field(default_factory=list, alias="deleted")
    diff: Optional[SchemaDiff] = Field(None, alias="changes")

    def is_empty(self) -> bool:
        return not (self.added_properties or self.deleted_properties or self.diff is not None)


class CRDVersionDiff(DiffModel):
    schema_changes: Dict[str, CRDSchemaDiff] = Field(default_factory=dict, alias="schemaChanges")
    breaking_changes: List[BreakingChange] = Field(default_factory=list, alias="breakingChanges")

    def has_changes(self) -> bool:
        return bool(self.schema_changes) or self.has_breaking_changes()

    def has_breaking_changes(self) -> bool:
        return bool(self.breaking_changes)


class CRDDiff(DiffModel):
    general: List[Change] = Field(default_factory=list, alias="generalChanges")
    added_versions: List[str] = Field(default_factory=list, alias="added")
    deleted_versions: List[str] = Field(default_factory=list, alias="deleted")
    changed_versions: Dict[str, CRDVersionDiff] = Field(default_factory=dict, alias="changed")

    def has_changes(self) -> bool:
        if self.general or self.added_versions or self.deleted_versions:
            return True
        return any(v.has_changes() for v in self.changed_versions.values())

    def has_breaking_changes(self) -> bool:
        # a deleted version is always breaking
        if self.deleted_versions:
            return True
        if any(change.breaking for change in self.general):
            return True
        return any(v.has_breaking_changes() for v in self.changed_versions.values())


def has_changes(diff: Optional[Any]) -> bool:
    """``diff.has_changes()``, with None counting as no changes."""
    if diff is None:
        return False
    return diff.has_changes()


def has_breaking_changes(diff: Optional[Any]) -> bool:
    """``diff.has_breaking_changes()``, with None counting as no changes."""
    if diff is None:
        return False
    return diff.has_breaking_changes()
