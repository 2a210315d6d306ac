"""Turn a structural schema diff into path-addressed schema changes.

The diff tree mirrors the schema: a node per schema node, with container
sub-diffs for ``properties``, ``items`` and ``additionalProperties``. The
normalizer flattens it into a mapping keyed by canonical path (see
``crdiff.kernel.paths``). A node only gets an entry of its own if one of
its leaf attributes changed; container sub-diffs are never reported at the
parent, they produce entries at child paths instead. Added and deleted
property names are attached to the path of the object that holds them.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from crdiff.kernel.models import CRDSchemaDiff
from crdiff.kernel.paths import (
    ROOT,
    additional_properties_path,
    items_path,
    property_path,
    render_path,
)
from crdiff.kernel.schema_diff import SchemaDiff, SchemasDiff

# Every diff attribute that counts as a leaf change. New diffable schema
# attributes must be added here explicitly.
LEAF_FIELDS: Tuple[str, ...] = (
    "extensions_diff",
    "one_of_diff",
    "any_of_diff",
    "all_of_diff",
    "not_diff",
    "type_diff",
    "title_diff",
    "format_diff",
    "description_diff",
    "enum_diff",
    "default_diff",
    "example_diff",
    "external_docs_diff",
    "additional_properties_allowed_diff",
    "unique_items_diff",
    "exclusive_min_diff",
    "exclusive_max_diff",
    "nullable_diff",
    "read_only_diff",
    "write_only_diff",
    "deprecated_diff",
    "min_diff",
    "max_diff",
    "multiple_of_diff",
    "min_length_diff",
    "max_length_diff",
    "pattern_diff",
    "min_items_diff",
    "max_items_diff",
    "required_diff",
    "min_props_diff",
    "max_props_diff",
    "discriminator_diff",
)

# Handled by recursion, never reported at the parent path.
CONTAINER_FIELDS: Tuple[str, ...] = (
    "items_diff",
    "properties_diff",
    "additional_properties_diff",
)


def _leaf_fields(ignore_descriptions: bool) -> Tuple[str, ...]:
    if ignore_descriptions:
        return tuple(f for f in LEAF_FIELDS if f != "description_diff")
    return LEAF_FIELDS


def has_leaf_diff(diff: SchemaDiff, ignore_descriptions: bool = False) -> bool:
    """Return True if any leaf attribute of this node changed."""
    return any(getattr(diff, name) is not None for name in _leaf_fields(ignore_descriptions))


def leaf_payload(diff: SchemaDiff, ignore_descriptions: bool = False) -> SchemaDiff:
    """Copy ``diff`` without its container sub-diffs (and description, if ignored)."""
    stripped = {name: None for name in CONTAINER_FIELDS}
    if ignore_descriptions:
        stripped["description_diff"] = None
    return diff.model_copy(update=stripped, deep=True)


def collect_schema_changes(
    diff: Optional[SchemaDiff],
    ignore_descriptions: bool = False,
    breaking_only: bool = False,
) -> Dict[str, CRDSchemaDiff]:
    """Flatten a schema diff into ``{canonical path: CRDSchemaDiff}``.

    Args:
        diff: Root of the diff tree (None means no changes)
        ignore_descriptions: Do not treat description changes as leaf changes
        breaking_only: Do not record added properties; leaf changes and
            deleted properties are always recorded

    Returns:
        Mapping with keys in sorted order
    """
    if diff is None:
        return {}

    collector = _Collector(ignore_descriptions, breaking_only)
    collector.visit_schema(diff, ROOT)

    return {path: collector.changes[path] for path in sorted(collector.changes)}


class _Collector:
    def __init__(self, ignore_descriptions: bool, breaking_only: bool):
        self.ignore_descriptions = ignore_descriptions
        self.breaking_only = breaking_only
        self.changes: Dict[str, CRDSchemaDiff] = {}

    def _entry(self, path: str) -> CRDSchemaDiff:
        key = render_path(path)
        if key not in self.changes:
            self.changes[key] = CRDSchemaDiff()
        return self.changes[key]

    def visit_schema(self, diff: SchemaDiff, path: str) -> None:
        if has_leaf_diff(diff, self.ignore_descriptions):
            self._entry(path).diff = leaf_payload(diff, self.ignore_descriptions)

        if diff.items_diff is not None:
            self.visit_schema(diff.items_diff, items_path(path))

        if diff.properties_diff is not None:
            self.visit_properties(diff.properties_diff, path)

        if diff.additional_properties_diff is not None:
            self.visit_schema(diff.additional_properties_diff, additional_properties_path(path))

    def visit_properties(self, diff: SchemasDiff, path: str) -> None:
        added = [] if self.breaking_only else sorted(diff.added)
        deleted = sorted(diff.deleted)

        if added or deleted:
            entry = self._entry(path)
            entry.added_properties = added
            entry.deleted_properties = deleted

        for name in sorted(diff.modified):
            self.visit_schema(diff.modified[name], property_path(path, name))
