"""Structural diff between two CRD version schemas.

This is the schema differencer consumed by the comparison engine. It only
understands the structural-schema subset of OpenAPI v3 that CRDs allow,
and produces a tree of diff nodes serialized with the usual OpenAPI diff
field names (``type``, ``format``, ``min``, ``maxLength``, ``required``, ``properties``...).

A node is only created where something differs; ``compare_schemas``
returns None for equal trees. Property names, required lists and enum
values are compared as sets, so source ordering never produces a diff.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from crdiff._internal.canonical_json import canonical_dumps
from crdiff.kernel.schema import JSONSchemaProps


class DiffModel(BaseModel):
    """Base for diff nodes; absent and empty members are not serialized."""

    model_config = ConfigDict(populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        data = handler(self)
        return {k: v for k, v in data.items() if v is not None and v != [] and v != {}}


class ValueDiff(BaseModel):
    """A scalar attribute changed; ``from``/``to`` are None when unset."""

    from_: Any = Field(None, alias="from")
    to: Any = None

    model_config = ConfigDict(populate_by_name=True)


class StringsDiff(DiffModel):
    added: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)


class EnumDiff(DiffModel):
    enum_added: bool = Field(False, alias="enumAdded")  # enum did not exist before
    enum_deleted: bool = Field(False, alias="enumDeleted")  # enum no longer exists
    added: List[Any] = Field(default_factory=list)
    deleted: List[Any] = Field(default_factory=list)


class SchemasDiff(DiffModel):
    """Changes to a name-keyed set of schemas (``properties``)."""

    added: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)
    modified: Dict[str, SchemaDiff] = Field(default_factory=dict)


class SchemaListDiff(DiffModel):
    """Changes to a positional list of schemas (``allOf``/``anyOf``/``oneOf``)."""

    added: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)
    modified: Dict[str, SchemaDiff] = Field(default_factory=dict)


class SchemaDiff(DiffModel):
    extensions_diff: Optional[Dict[str, ValueDiff]] = Field(None, alias="extensions")
    one_of_diff: Optional[SchemaListDiff] = Field(None, alias="oneOf")
    any_of_diff: Optional[SchemaListDiff] = Field(None, alias="anyOf")
    all_of_diff: Optional[SchemaListDiff] = Field(None, alias="allOf")
    not_diff: Optional[SchemaDiff] = Field(None, alias="not")
    type_diff: Optional[ValueDiff] = Field(None, alias="type")
    title_diff: Optional[ValueDiff] = Field(None, alias="title")
    format_diff: Optional[ValueDiff] = Field(None, alias="format")
    description_diff: Optional[ValueDiff] = Field(None, alias="description")
    enum_diff: Optional[EnumDiff] = Field(None, alias="enum")
    default_diff: Optional[ValueDiff] = Field(None, alias="default")
    example_diff: Optional[ValueDiff] = Field(None, alias="example")
    external_docs_diff: Optional[ValueDiff] = Field(None, alias="externalDocs")
    additional_properties_allowed_diff: Optional[ValueDiff] = Field(None, alias="additionalPropertiesAllowed")
    unique_items_diff: Optional[ValueDiff] = Field(None, alias="uniqueItems")
    exclusive_min_diff: Optional[ValueDiff] = Field(None, alias="exclusiveMin")
    exclusive_max_diff: Optional[ValueDiff] = Field(None, alias="exclusiveMax")
    nullable_diff: Optional[ValueDiff] = Field(None, alias="nullable")
    read_only_diff: Optional[ValueDiff] = Field(None, alias="readOnly")
    write_only_diff: Optional[ValueDiff] = Field(None, alias="writeOnly")
    deprecated_diff: Optional[ValueDiff] = Field(None, alias="deprecated")
    min_diff: Optional[ValueDiff] = Field(None, alias="min")
    max_diff: Optional[ValueDiff] = Field(None, alias="max")
    multiple_of_diff: Optional[ValueDiff] = Field(None, alias="multipleOf")
    min_length_diff: Optional[ValueDiff] = Field(None, alias="minLength")
    max_length_diff: Optional[ValueDiff] = Field(None, alias="maxLength")
    pattern_diff: Optional[ValueDiff] = Field(None, alias="pattern")
    min_items_diff: Optional[ValueDiff] = Field(None, alias="minItems")
    max_items_diff: Optional[ValueDiff] = Field(None, alias="maxItems")
    items_diff: Optional[SchemaDiff] = Field(None, alias="items")
    required_diff: Optional[StringsDiff] = Field(None, alias="required")
    properties_diff: Optional[SchemasDiff] = Field(None, alias="properties")
    min_props_diff: Optional[ValueDiff] = Field(None, alias="minProps")
    max_props_diff: Optional[ValueDiff] = Field(None, alias="maxProps")
    additional_properties_diff: Optional[SchemaDiff] = Field(None, alias="additionalProperties")
    discriminator_diff: Optional[ValueDiff] = Field(None, alias="discriminator")

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


SchemasDiff.model_rebuild()
SchemaListDiff.model_rebuild()
SchemaDiff.model_rebuild()


# (schema attribute, diff attribute) pairs compared as plain values
_VALUE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("type", "type_diff"),
    ("title", "title_diff"),
    ("format", "format_diff"),
    ("description", "description_diff"),
    ("default", "default_diff"),
    ("example", "example_diff"),
    ("external_docs", "external_docs_diff"),
    ("additional_properties_allowed", "additional_properties_allowed_diff"),
    ("unique_items", "unique_items_diff"),
    ("exclusive_minimum", "exclusive_min_diff"),
    ("exclusive_maximum", "exclusive_max_diff"),
    ("nullable", "nullable_diff"),
    ("read_only", "read_only_diff"),
    ("write_only", "write_only_diff"),
    ("deprecated", "deprecated_diff"),
    ("minimum", "min_diff"),
    ("maximum", "max_diff"),
    ("multiple_of", "multiple_of_diff"),
    ("min_length", "min_length_diff"),
    ("max_length", "max_length_diff"),
    ("pattern", "pattern_diff"),
    ("min_items", "min_items_diff"),
    ("max_items", "max_items_diff"),
    ("min_properties", "min_props_diff"),
    ("max_properties", "max_props_diff"),
    ("discriminator", "discriminator_diff"),
)

# Free-form JSON values: compared by their canonical encoding, so that
# false, 0 and 0.0 are distinct values.
_UNTYPED_FIELDS = frozenset({"default", "example", "external_docs", "discriminator"})


def compare_schemas(
    base: Optional[JSONSchemaProps],
    revision: Optional[JSONSchemaProps],
) -> Optional[SchemaDiff]:
    """Compute the structural diff of two schemas.

    An absent schema compares like an empty one.

    Returns:
        SchemaDiff rooted at the top-level schema, or None if both are equal
    """
    return _diff_schema(base or JSONSchemaProps(), revision or JSONSchemaProps())


def _diff_schema(base: JSONSchemaProps, revision: JSONSchemaProps) -> Optional[SchemaDiff]:
    fields: Dict[str, Any] = {}

    for attr, diff_attr in _VALUE_FIELDS:
        value_diff = _diff_value(getattr(base, attr), getattr(revision, attr), untyped=attr in _UNTYPED_FIELDS)
        if value_diff is not None:
            fields[diff_attr] = value_diff

    extensions_diff = _diff_extensions(base.extensions, revision.extensions)
    if extensions_diff:
        fields["extensions_diff"] = extensions_diff

    required_diff = _diff_strings(base.required, revision.required)
    if required_diff is not None:
        fields["required_diff"] = required_diff

    enum_diff = _diff_enum(base.enum, revision.enum)
    if enum_diff is not None:
        fields["enum_diff"] = enum_diff

    for attr, diff_attr in (("all_of", "all_of_diff"), ("any_of", "any_of_diff"), ("one_of", "one_of_diff")):
        list_diff = _diff_schema_list(getattr(base, attr), getattr(revision, attr))
        if list_diff is not None:
            fields[diff_attr] = list_diff

    for attr, diff_attr in (
        ("not_", "not_diff"),
        ("items", "items_diff"),
        ("additional_properties", "additional_properties_diff"),
    ):
        sub_diff = _diff_optional_schema(getattr(base, attr), getattr(revision, attr))
        if sub_diff is not None:
            fields[diff_attr] = sub_diff

    properties_diff = _diff_properties(base.properties, revision.properties)
    if properties_diff is not None:
        fields["properties_diff"] = properties_diff

    if not fields:
        return None

    return SchemaDiff(**fields)


def _diff_value(base: Any, revision: Any, untyped: bool = False) -> Optional[ValueDiff]:
    if untyped:
        if _value_key(base) == _value_key(revision):
            return None
    elif base == revision:
        return None
    return ValueDiff(from_=base, to=revision)


def _diff_extensions(base: Dict[str, Any], revision: Dict[str, Any]) -> Dict[str, ValueDiff]:
    result: Dict[str, ValueDiff] = {}
    for key in sorted(set(base) | set(revision)):
        value_diff = _diff_value(base.get(key), revision.get(key), untyped=True)
        if value_diff is not None:
            result[key] = value_diff
    return result


def _diff_strings(base: Optional[List[str]], revision: Optional[List[str]]) -> Optional[StringsDiff]:
    base_set = set(base or [])
    revision_set = set(revision or [])
    if base_set == revision_set:
        return None
    return StringsDiff(
        added=sorted(revision_set - base_set),
        deleted=sorted(base_set - revision_set),
    )


def _value_key(value: Any) -> str:
    # values may be unhashable (objects, lists)
    return canonical_dumps(value)


def _diff_enum(base: Optional[List[Any]], revision: Optional[List[Any]]) -> Optional[EnumDiff]:
    if base is None and revision is None:
        return None

    base_values = {_value_key(v): v for v in (base or [])}
    revision_values = {_value_key(v): v for v in (revision or [])}

    enum_added = base is None
    enum_deleted = revision is None
    added = [revision_values[k] for k in sorted(set(revision_values) - set(base_values))]
    deleted = [base_values[k] for k in sorted(set(base_values) - set(revision_values))]

    if not (enum_added or enum_deleted or added or deleted):
        return None

    return EnumDiff(enum_added=enum_added, enum_deleted=enum_deleted, added=added, deleted=deleted)


def _diff_optional_schema(
    base: Optional[JSONSchemaProps],
    revision: Optional[JSONSchemaProps],
) -> Optional[SchemaDiff]:
    if base is None and revision is None:
        return None
    return _diff_schema(base or JSONSchemaProps(), revision or JSONSchemaProps())


def _diff_schema_list(
    base: Optional[List[JSONSchemaProps]],
    revision: Optional[List[JSONSchemaProps]],
) -> Optional[SchemaListDiff]:
    base = base or []
    revision = revision or []

    modified: Dict[str, SchemaDiff] = {}
    for index in range(min(len(base), len(revision))):
        sub_diff = _diff_schema(base[index], revision[index])
        if sub_diff is not None:
            modified[str(index)] = sub_diff

    added = [str(i) for i in range(len(base), len(revision))]
    deleted = [str(i) for i in range(len(revision), len(base))]

    if not (added or deleted or modified):
        return None

    return SchemaListDiff(added=added, deleted=deleted, modified=modified)


def _diff_properties(
    base: Optional[Dict[str, JSONSchemaProps]],
    revision: Optional[Dict[str, JSONSchemaProps]],
) -> Optional[SchemasDiff]:
    base = base or {}
    revision = revision or {}

    modified: Dict[str, SchemaDiff] = {}
    for name in sorted(set(base) & set(revision)):
        sub_diff = _diff_schema(base[name], revision[name])
        if sub_diff is not None:
            modified[name] = sub_diff

    added = sorted(set(revision) - set(base))
    deleted = sorted(set(base) - set(revision))

    if not (added or deleted or modified):
        return None

    return SchemasDiff(added=added, deleted=deleted, modified=modified)
