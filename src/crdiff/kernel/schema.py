"""Pydantic model for the recursive OpenAPI v3 schema carried by CRD versions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Number = Union[int, float]


class JSONSchemaProps(BaseModel):
    """A single node of a CRD validation schema.

    Mirrors apiextensions.k8s.io/v1 JSONSchemaProps for the attributes that
    take part in comparisons. Two spellings are normalized at parse time:

    - ``additionalProperties`` may be a boolean or a schema; it is split into
      ``additional_properties_allowed`` and ``additional_properties``.
    - ``items`` may be written as a one-element list; it is collapsed to the
      single schema.

    Every ``x-*`` key (``x-kubernetes-preserve-unknown-fields`` and friends)
    is collected into ``extensions``. Keys that never affect validation
    (``$schema``, ``id``, ``definitions``...) are ignored.
    """

    type: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    default: Any = None
    example: Any = None
    enum: Optional[List[Any]] = None
    pattern: Optional[str] = None

    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_minimum: Optional[bool] = Field(None, alias="exclusiveMinimum")
    exclusive_maximum: Optional[bool] = Field(None, alias="exclusiveMaximum")
    multiple_of: Optional[Number] = Field(None, alias="multipleOf")
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")
    min_items: Optional[int] = Field(None, alias="minItems")
    max_items: Optional[int] = Field(None, alias="maxItems")
    unique_items: Optional[bool] = Field(None, alias="uniqueItems")
    min_properties: Optional[int] = Field(None, alias="minProperties")
    max_properties: Optional[int] = Field(None, alias="maxProperties")
    required: Optional[List[str]] = None

    nullable: Optional[bool] = None
    read_only: Optional[bool] = Field(None, alias="readOnly")
    write_only: Optional[bool] = Field(None, alias="writeOnly")
    deprecated: Optional[bool] = None
    discriminator: Optional[Dict[str, Any]] = None
    external_docs: Optional[Dict[str, Any]] = Field(None, alias="externalDocs")

    properties: Optional[Dict[str, JSONSchemaProps]] = None
    items: Optional[JSONSchemaProps] = None
    additional_properties: Optional[JSONSchemaProps] = None
    additional_properties_allowed: Optional[bool] = None

    all_of: Optional[List[JSONSchemaProps]] = Field(None, alias="allOf")
    any_of: Optional[List[JSONSchemaProps]] = Field(None, alias="anyOf")
    one_of: Optional[List[JSONSchemaProps]] = Field(None, alias="oneOf")
    not_: Optional[JSONSchemaProps] = Field(None, alias="not")

    extensions: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_document(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)

        extension_keys = sorted(k for k in data if isinstance(k, str) and k.startswith("x-"))
        if extension_keys:
            extensions = dict(data.get("extensions") or {})
            for key in extension_keys:
                extensions[key] = data.pop(key)
            data["extensions"] = extensions

        if "additionalProperties" in data:
            additional = data.pop("additionalProperties")
            if isinstance(additional, bool):
                data["additional_properties_allowed"] = additional
            elif additional is not None:
                data["additional_properties"] = additional

        items = data.get("items")
        if isinstance(items, list):
            if len(items) != 1:
                raise ValueError(
                    f"items must be a single schema, got a list of {len(items)} schemas"
                )
            data["items"] = items[0]

        return data

    def property_names(self) -> List[str]:
        """Sorted names of the directly nested properties."""
        return sorted(self.properties or {})

    def is_required(self, name: str) -> bool:
        return name in (self.required or [])


def parse_schema(data: Optional[Dict[str, Any]]) -> Optional[JSONSchemaProps]:
    """Parse a raw schema mapping; ``None`` stays ``None``."""
    if data is None:
        return None
    return JSONSchemaProps.model_validate(data)
