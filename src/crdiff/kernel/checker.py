"""Backward-compatibility checker for CRD version schemas.

The checker treats a CRD schema like a request body: every change that can
make a previously accepted object invalid is reported. It walks the diff
tree produced by ``compare_schemas`` alongside the two schema trees (the
diff alone does not say whether an added property is required).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from crdiff.codes import FindingId, Level
from crdiff.kernel.messages import LocalizedMessage
from crdiff.kernel.paths import (
    ROOT,
    additional_properties_path,
    items_path,
    property_path,
    render_path,
)
from crdiff.kernel.schema import JSONSchemaProps
from crdiff.kernel.schema_diff import SchemaDiff, ValueDiff

RULE_LEVELS: Dict[FindingId, Level] = {
    FindingId.NEW_REQUIRED_PROPERTY: Level.ERROR,
    FindingId.NEW_OPTIONAL_PROPERTY: Level.INFO,
    FindingId.PROPERTY_BECAME_REQUIRED: Level.ERROR,
    FindingId.PROPERTY_BECAME_OPTIONAL: Level.INFO,
    FindingId.PROPERTY_REMOVED: Level.WARNING,
    FindingId.PROPERTY_TYPE_CHANGED: Level.ERROR,
    FindingId.PROPERTY_BECAME_ENUM: Level.ERROR,
    FindingId.PROPERTY_ENUM_VALUE_REMOVED: Level.ERROR,
    FindingId.PROPERTY_ENUM_VALUE_ADDED: Level.INFO,
    FindingId.PROPERTY_MAX_LENGTH_SET: Level.WARNING,
    FindingId.PROPERTY_MAX_LENGTH_DECREASED: Level.ERROR,
    FindingId.PROPERTY_MIN_LENGTH_SET: Level.WARNING,
    FindingId.PROPERTY_MIN_LENGTH_INCREASED: Level.ERROR,
    FindingId.PROPERTY_MIN_ITEMS_SET: Level.WARNING,
    FindingId.PROPERTY_MIN_ITEMS_INCREASED: Level.ERROR,
    FindingId.PROPERTY_MAX_ITEMS_DECREASED: Level.ERROR,
    FindingId.PROPERTY_MIN_SET: Level.WARNING,
    FindingId.PROPERTY_MIN_INCREASED: Level.ERROR,
    FindingId.PROPERTY_MAX_SET: Level.WARNING,
    FindingId.PROPERTY_MAX_DECREASED: Level.ERROR,
    FindingId.PROPERTY_PATTERN_ADDED: Level.WARNING,
    FindingId.PROPERTY_PATTERN_CHANGED: Level.WARNING,
    FindingId.PROPERTY_BECAME_NOT_NULLABLE: Level.ERROR,
}


@dataclass(frozen=True)
class Finding:
    """One atomic compatibility finding."""
    id: FindingId
    level: Level
    message: LocalizedMessage

    @property
    def path(self) -> Optional[str]:
        return self.message.path


def check_compatibility(
    diff: Optional[SchemaDiff],
    base: Optional[JSONSchemaProps],
    revision: Optional[JSONSchemaProps],
    level: Level = Level.WARNING,
) -> List[Finding]:
    """Flag the changes in ``diff`` that break existing objects.

    Args:
        diff: Diff of ``base`` against ``revision`` (None if equal)
        base: Base schema
        revision: Revision schema
        level: Severity floor; findings below it are dropped

    Returns:
        Findings sorted by (path, id)
    """
    if diff is None:
        return []

    checker = _Checker()
    checker.visit(diff, base or JSONSchemaProps(), revision or JSONSchemaProps(), ROOT)

    findings = [f for f in checker.findings if f.level.rank >= level.rank]
    findings.sort(key=lambda f: (f.path or "", f.id.value))
    return findings


class _Checker:
    def __init__(self):
        self.findings: List[Finding] = []

    def report(self, finding_id: FindingId, *args: Any) -> None:
        self.findings.append(
            Finding(
                id=finding_id,
                level=RULE_LEVELS[finding_id],
                message=LocalizedMessage(finding_id.value, tuple(args)),
            )
        )

    def visit(self, diff: SchemaDiff, base: JSONSchemaProps, revision: JSONSchemaProps, path: str) -> None:
        shown = render_path(path)

        if diff.type_diff is not None or diff.format_diff is not None:
            self.report(
                FindingId.PROPERTY_TYPE_CHANGED,
                shown, base.type, base.format, revision.type, revision.format,
            )

        if diff.nullable_diff is not None and diff.nullable_diff.from_ and not diff.nullable_diff.to:
            self.report(FindingId.PROPERTY_BECAME_NOT_NULLABLE, shown)

        self._check_enum(diff, shown)
        self._check_bounds(diff, shown)
        self._check_pattern(diff.pattern_diff, shown)
        self._check_properties(diff, base, revision, path)

        if diff.items_diff is not None:
            self.visit(
                diff.items_diff,
                base.items or JSONSchemaProps(),
                revision.items or JSONSchemaProps(),
                items_path(path),
            )

        if diff.additional_properties_diff is not None:
            self.visit(
                diff.additional_properties_diff,
                base.additional_properties or JSONSchemaProps(),
                revision.additional_properties or JSONSchemaProps(),
                additional_properties_path(path),
            )

    def _check_enum(self, diff: SchemaDiff, shown: str) -> None:
        enum_diff = diff.enum_diff
        if enum_diff is None or enum_diff.enum_deleted:
            return
        if enum_diff.enum_added:
            self.report(FindingId.PROPERTY_BECAME_ENUM, shown)
            return
        for value in enum_diff.deleted:
            self.report(FindingId.PROPERTY_ENUM_VALUE_REMOVED, value, shown)
        for value in enum_diff.added:
            self.report(FindingId.PROPERTY_ENUM_VALUE_ADDED, value, shown)

    def _check_bounds(self, diff: SchemaDiff, shown: str) -> None:
        # (diff, "set" finding, "tightened" finding, lower bound?)
        rules = (
            (diff.max_length_diff, FindingId.PROPERTY_MAX_LENGTH_SET, FindingId.PROPERTY_MAX_LENGTH_DECREASED, False),
            (diff.min_length_diff, FindingId.PROPERTY_MIN_LENGTH_SET, FindingId.PROPERTY_MIN_LENGTH_INCREASED, True),
            (diff.min_items_diff, FindingId.PROPERTY_MIN_ITEMS_SET, FindingId.PROPERTY_MIN_ITEMS_INCREASED, True),
            (diff.max_items_diff, None, FindingId.PROPERTY_MAX_ITEMS_DECREASED, False),
            (diff.min_diff, FindingId.PROPERTY_MIN_SET, FindingId.PROPERTY_MIN_INCREASED, True),
            (diff.max_diff, FindingId.PROPERTY_MAX_SET, FindingId.PROPERTY_MAX_DECREASED, False),
        )
        for value_diff, set_id, tightened_id, lower in rules:
            if value_diff is None or value_diff.to is None:
                continue
            if value_diff.from_ is None:
                if set_id is not None:
                    self.report(set_id, shown, value_diff.to)
                continue
            tightened = value_diff.to > value_diff.from_ if lower else value_diff.to < value_diff.from_
            if tightened:
                self.report(tightened_id, shown, value_diff.from_, value_diff.to)

    def _check_pattern(self, pattern_diff: Optional[ValueDiff], shown: str) -> None:
        if pattern_diff is None or pattern_diff.to is None:
            return
        if pattern_diff.from_ is None:
            self.report(FindingId.PROPERTY_PATTERN_ADDED, pattern_diff.to, shown)
        else:
            self.report(FindingId.PROPERTY_PATTERN_CHANGED, shown, pattern_diff.from_, pattern_diff.to)

    def _check_properties(self, diff: SchemaDiff, base: JSONSchemaProps, revision: JSONSchemaProps, path: str) -> None:
        added = set()
        deleted = set()

        if diff.properties_diff is not None:
            properties_diff = diff.properties_diff
            added = set(properties_diff.added)
            deleted = set(properties_diff.deleted)

            for name in properties_diff.added:
                if revision.is_required(name):
                    self.report(FindingId.NEW_REQUIRED_PROPERTY, property_path(path, name))
                else:
                    self.report(FindingId.NEW_OPTIONAL_PROPERTY, property_path(path, name))

            for name in properties_diff.deleted:
                self.report(FindingId.PROPERTY_REMOVED, property_path(path, name))

            for name, sub_diff in properties_diff.modified.items():
                self.visit(
                    sub_diff,
                    (base.properties or {})[name],
                    (revision.properties or {})[name],
                    property_path(path, name),
                )

        if diff.required_diff is not None:
            # additions and removals of the property itself are reported above
            for name in diff.required_diff.added:
                if name not in added:
                    self.report(FindingId.PROPERTY_BECAME_REQUIRED, property_path(path, name))
            for name in diff.required_diff.deleted:
                if name not in deleted:
                    self.report(FindingId.PROPERTY_BECAME_OPTIONAL, property_path(path, name))
