"""CRD model: a uniform view over apiextensions v1 and v1beta1 definitions.

The comparison engine only ever talks to the ``CRD`` interface; the
concrete classes below absorb the differences between the two API versions
of the CustomResourceDefinition type itself, so that every schema reaches
the differencer in the same ``JSONSchemaProps`` shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from crdiff.errors import DuplicateVersionError
from crdiff.kernel.schema import JSONSchemaProps

API_GROUP = "apiextensions.k8s.io"
API_VERSION_V1 = f"{API_GROUP}/v1"
API_VERSION_V1BETA1 = f"{API_GROUP}/v1beta1"
CRD_KIND = "CustomResourceDefinition"


class CustomResourceValidation(BaseModel):
    open_api_v3_schema: Optional[JSONSchemaProps] = Field(None, alias="openAPIV3Schema")

    model_config = ConfigDict(populate_by_name=True)


class CRDNames(BaseModel):
    kind: str
    plural: Optional[str] = None
    singular: Optional[str] = None
    list_kind: Optional[str] = Field(None, alias="listKind")
    short_names: List[str] = Field(default_factory=list, alias="shortNames")
    categories: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class ObjectMeta(BaseModel):
    name: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class CRDVersion(BaseModel):
    name: str
    served: bool = True
    storage: bool = False
    deprecated: bool = False
    validation_schema: Optional[CustomResourceValidation] = Field(None, alias="schema")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CRDSpecV1(BaseModel):
    group: str
    names: CRDNames
    scope: Literal["Namespaced", "Cluster"]
    versions: List[CRDVersion]

    model_config = ConfigDict(extra="ignore")


class CRDSpecV1beta1(BaseModel):
    group: str
    names: CRDNames
    scope: Literal["Namespaced", "Cluster"] = "Namespaced"
    version: Optional[str] = None
    versions: List[CRDVersion] = Field(default_factory=list)
    validation: Optional[CustomResourceValidation] = None

    model_config = ConfigDict(extra="ignore")


class CustomResourceDefinitionV1(BaseModel):
    api_version: Literal["apiextensions.k8s.io/v1"] = Field(alias="apiVersion")
    kind: Literal["CustomResourceDefinition"]
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CRDSpecV1

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CustomResourceDefinitionV1beta1(BaseModel):
    api_version: Literal["apiextensions.k8s.io/v1beta1"] = Field(alias="apiVersion")
    kind: Literal["CustomResourceDefinition"]
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CRDSpecV1beta1

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CRD(ABC):
    """Read-only view of one custom resource definition."""

    @abstractmethod
    def identifier(self) -> str:
        """Return ``<group>/<Kind>``."""

    @abstractmethod
    def scope(self) -> str:
        """Return ``Namespaced`` or ``Cluster``."""

    @abstractmethod
    def version_names(self) -> List[str]:
        """Return all declared version names in declaration order."""

    @abstractmethod
    def schema(self, version: str) -> Optional[JSONSchemaProps]:
        """Return the schema for ``version``, or None if unknown."""

    def versions(self) -> List[str]:
        """Return the sorted version names.

        Raises:
            DuplicateVersionError: if a version name is declared twice
        """
        seen = set()
        for name in self.version_names():
            if name in seen:
                raise DuplicateVersionError(self.identifier(), name)
            seen.add(name)
        return sorted(seen)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.identifier()}>"


class CRDV1(CRD):
    """apiextensions.k8s.io/v1 CustomResourceDefinition."""

    def __init__(self, definition: CustomResourceDefinitionV1):
        self.definition = definition

    def identifier(self) -> str:
        spec = self.definition.spec
        return f"{spec.group}/{spec.names.kind}"

    def scope(self) -> str:
        return self.definition.spec.scope

    def version_names(self) -> List[str]:
        return [v.name for v in self.definition.spec.versions]

    def schema(self, version: str) -> Optional[JSONSchemaProps]:
        for v in self.definition.spec.versions:
            if v.name == version:
                if v.validation_schema is None:
                    return None
                return v.validation_schema.open_api_v3_schema
        return None


class CRDV1beta1(CRD):
    """Legacy apiextensions.k8s.io/v1beta1 CustomResourceDefinition.

    The schema types of v1beta1 and v1 are identical, so no conversion is
    needed beyond resolving where the schema lives: a per-version schema
    wins over the CRD-wide ``spec.validation``, and a definition that only
    sets the deprecated ``spec.version`` exposes that single version.
    """

    def __init__(self, definition: CustomResourceDefinitionV1beta1):
        self.definition = definition

    def identifier(self) -> str:
        spec = self.definition.spec
        return f"{spec.group}/{spec.names.kind}"

    def scope(self) -> str:
        return self.definition.spec.scope

    def version_names(self) -> List[str]:
        spec = self.definition.spec
        if spec.versions:
            return [v.name for v in spec.versions]
        if spec.version:
            return [spec.version]
        return []

    def schema(self, version: str) -> Optional[JSONSchemaProps]:
        if version not in self.version_names():
            return None

        spec = self.definition.spec
        for v in spec.versions:
            if v.name == version and v.validation_schema is not None:
                if v.validation_schema.open_api_v3_schema is not None:
                    return v.validation_schema.open_api_v3_schema

        if spec.validation is not None:
            return spec.validation.open_api_v3_schema

        return None


def parse_crd(document: Dict[str, Any]) -> CRD:
    """Parse a decoded CustomResourceDefinition document.

    Raises:
        ValueError: on an unrecognized apiVersion
        pydantic.ValidationError: if the document does not match its apiVersion
    """
    api_version = document.get("apiVersion")

    if api_version == API_VERSION_V1:
        return CRDV1(CustomResourceDefinitionV1.model_validate(document))
    if api_version == API_VERSION_V1BETA1:
        return CRDV1beta1(CustomResourceDefinitionV1beta1.model_validate(document))

    raise ValueError(f"document is using unrecognized API version {api_version!r}")
