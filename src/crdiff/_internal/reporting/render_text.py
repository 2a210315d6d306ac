"""Render a Report as hierarchical, human-readable text (internal).

Layout: one block per CRD (heading underlined with ``=``), general changes
and added/removed versions first, then one block per changed version
(heading underlined with ``-``) holding the changes per schema path and the
breaking changes found in that version. Every level is sorted.
"""

from typing import Any, List, Optional

from crdiff._internal.reporting.indent import Indenter
from crdiff.kernel.messages import format_value
from crdiff.kernel.models import CRDDiff, CRDVersionDiff
from crdiff.kernel.report import Report
from crdiff.kernel.schema_diff import EnumDiff, SchemaDiff, SchemaListDiff, ValueDiff

# (diff attribute, label) for attributes printed as "set/changed/removed"
_VALUE_LABELS = (
    ("type_diff", "type"),
    ("title_diff", "title"),
    ("format_diff", "format"),
    ("description_diff", "description"),
    ("default_diff", "default value"),
    ("example_diff", "example"),
    ("external_docs_diff", "external docs"),
    ("additional_properties_allowed_diff", "additional properties allowed"),
    ("unique_items_diff", "unique items"),
    ("exclusive_min_diff", "exclusive minimum"),
    ("exclusive_max_diff", "exclusive maximum"),
    ("nullable_diff", "nullable"),
    ("read_only_diff", "read-only"),
    ("write_only_diff", "write-only"),
    ("deprecated_diff", "deprecated"),
    ("min_diff", "minimum allowed value"),
    ("max_diff", "maximum allowed value"),
    ("multiple_of_diff", "multiple of"),
    ("min_length_diff", "minimum required length"),
    ("max_length_diff", "maximum allowed length"),
    ("pattern_diff", "pattern"),
    ("min_items_diff", "minimum required items"),
    ("max_items_diff", "maximum allowed items"),
    ("min_props_diff", "minimum required properties"),
    ("max_props_diff", "maximum allowed properties"),
    ("discriminator_diff", "discriminator"),
)

_LIST_LABELS = (
    ("all_of_diff", "allOf"),
    ("any_of_diff", "anyOf"),
    ("one_of_diff", "oneOf"),
)


def render_text(report: Report, breaking_only: bool = False) -> str:
    printer = Indenter()
    first = True

    for identifier in sorted(report.diffs):
        crd_diff = report.diffs[identifier]
        if not _should_print(crd_diff, breaking_only):
            continue

        if not first:
            printer.add_line("")
        first = False

        printer.add(_render_crd(identifier, crd_diff, breaking_only))

    return str(printer)


def _should_print(diff: Any, breaking_only: bool) -> bool:
    if breaking_only:
        return diff.has_breaking_changes()
    return diff.has_changes()


def _heading(text: str, underline: str) -> str:
    return f"{text}\n{underline * len(text)}"


def _render_crd(identifier: str, crd_diff: CRDDiff, breaking_only: bool) -> Indenter:
    printer = Indenter()
    printer.add_line(_heading(identifier, "="))
    printer.indent()

    general = Indenter()
    for change in crd_diff.general:
        general.add_line(f"~ {change.description}")

    if not breaking_only:
        for version in sorted(crd_diff.added_versions):
            general.add_line(f"+ added {version}")

    for version in sorted(crd_diff.deleted_versions):
        general.add_line(f"- removed {version}")

    if not general.empty():
        printer.add_line("")
        printer.add(general)

    for version in sorted(crd_diff.changed_versions):
        version_diff = crd_diff.changed_versions[version]
        if not _should_print(version_diff, breaking_only):
            continue

        rendered = _render_version(version, version_diff)
        if rendered is not None:
            printer.add_line("")
            printer.add(rendered)

    return printer


def _render_version(version: str, version_diff: CRDVersionDiff) -> Optional[Indenter]:
    blocks: List[Indenter] = []

    for path in sorted(version_diff.schema_changes):
        path_changes = version_diff.schema_changes[path]

        changes = Indenter()
        for name in path_changes.added_properties:
            changes.add_line(f"+ added {name}")
        for name in path_changes.deleted_properties:
            changes.add_line(f"- removed {name}")
        if path_changes.diff is not None:
            _render_schema_diff(path_changes.diff, changes)

        if not changes.empty():
            block = Indenter()
            block.add_line(f"{path}:")
            block.indent()
            block.add(changes)
            blocks.append(block)

    if version_diff.breaking_changes:
        block = Indenter()
        block.add_line("breaking changes:")
        block.indent()
        for change in version_diff.breaking_changes:
            block.add_line(f"! {change.level.value}: {change.message or change.details} ({change.id})")
        blocks.append(block)

    if not blocks:
        return None

    result = Indenter()
    result.add_line(_heading(version, "-"))
    result.indent()
    for block in blocks:
        result.add_line("")
        result.add(block)

    return result


def _render_value_diff(label: str, diff: ValueDiff, printer: Indenter) -> None:
    if diff.from_ is None:
        printer.add_line(f"~ set {label} to {format_value(diff.to)}")
    elif diff.to is None:
        printer.add_line(f"~ removed {label}")
    else:
        printer.add_line(f"~ changed {label} from {format_value(diff.from_)} to {format_value(diff.to)}")


def _render_enum_diff(diff: EnumDiff, printer: Indenter) -> None:
    if diff.enum_added:
        printer.add_line(f"~ restricted to enum {format_value(diff.added)}")
        return
    if diff.enum_deleted:
        printer.add_line("~ removed enum restriction")
        return
    if diff.added:
        printer.add_line(f"~ added enum values {format_value(diff.added)}")
    if diff.deleted:
        printer.add_line(f"~ removed enum values {format_value(diff.deleted)}")


def _render_list_diff(label: str, diff: SchemaListDiff, printer: Indenter) -> None:
    if diff.added:
        printer.add_line(f"~ added {label} entries {format_value(diff.added)}")
    if diff.deleted:
        printer.add_line(f"~ removed {label} entries {format_value(diff.deleted)}")
    if diff.modified:
        printer.add_line(f"~ changed {label} entries {format_value(sorted(diff.modified))}")


def _render_schema_diff(diff: SchemaDiff, printer: Indenter) -> None:
    for key in sorted(diff.extensions_diff or {}):
        _render_value_diff(f"extension {key}", diff.extensions_diff[key], printer)

    for attr, label in _LIST_LABELS:
        list_diff = getattr(diff, attr)
        if list_diff is not None:
            _render_list_diff(label, list_diff, printer)

    if diff.not_diff is not None:
        printer.add_line("~ changed not")

    if diff.enum_diff is not None:
        _render_enum_diff(diff.enum_diff, printer)

    for attr, label in _VALUE_LABELS:
        value_diff = getattr(diff, attr)
        if value_diff is not None:
            _render_value_diff(label, value_diff, printer)

    if diff.required_diff is not None:
        if diff.required_diff.added:
            printer.add_line(f"~ requires {format_value(diff.required_diff.added)}")
        if diff.required_diff.deleted:
            printer.add_line(f"~ unrequires {format_value(diff.required_diff.deleted)}")
