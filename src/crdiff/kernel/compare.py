"""Per-CRD comparison: general changes, version sets and schema diffs."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from crdiff.codes import Level
from crdiff.errors import ComparisonError, IdentityMismatchError
from crdiff.kernel.checker import Finding, check_compatibility
from crdiff.kernel.crd import CRD
from crdiff.kernel.models import BreakingChange, Change, CRDDiff, CRDVersionDiff
from crdiff.kernel.normalize import collect_schema_changes
from crdiff.kernel.schema_diff import compare_schemas
from crdiff.kernel.versions import match_versions

CRD_REMOVED = "CRD has been removed"
CRD_ADDED = "CRD has been added"

# Findings below this level never make it into a report.
BREAKING_LEVEL = Level.WARNING


class CompareOptions(BaseModel):
    """Options of a comparison run, passed explicitly into every call."""

    versions: Tuple[str, ...] = ()
    breaking_only: bool = False
    ignore_descriptions: bool = False
    include_unchanged: bool = False
    include_added_crds: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("versions", mode="before")
    @classmethod
    def _split_versions(cls, value):
        """Accept a list of names, each possibly comma-separated."""
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        names = []
        for item in value:
            names.extend(part.strip() for part in item.split(",") if part.strip())
        return tuple(sorted(set(names)))


def correlate_breaking_changes(findings: Iterable[Finding]) -> List[BreakingChange]:
    """Copy checker findings into report records, in the order given.

    Findings below the breaking floor are dropped.
    """
    result = []
    for finding in findings:
        if finding.level.rank < BREAKING_LEVEL.rank:
            continue
        result.append(
            BreakingChange(
                id=finding.id.value,
                level=finding.level,
                details=finding.message.dissect(),
                message=finding.message.text(),
            )
        )
    return result


def compare_version(
    base: CRD,
    revision: CRD,
    version: str,
    options: Optional[CompareOptions] = None,
) -> Optional[CRDVersionDiff]:
    """Compare one version present in both CRDs.

    Returns:
        CRDVersionDiff, or None if the version has nothing to report

    Raises:
        ComparisonError: if diffing or checking the schemas fails
    """
    options = options or CompareOptions()
    identifier = base.identifier()
    base_schema = base.schema(version)
    revision_schema = revision.schema(version)

    try:
        schema_diff = compare_schemas(base_schema, revision_schema)
    except Exception as e:
        raise ComparisonError(identifier, version, "diff", e) from e

    if schema_diff is None:
        return None

    try:
        findings = check_compatibility(schema_diff, base_schema, revision_schema, level=BREAKING_LEVEL)
    except Exception as e:
        raise ComparisonError(identifier, version, "check", e) from e

    version_diff = CRDVersionDiff(
        schema_changes=collect_schema_changes(
            schema_diff,
            ignore_descriptions=options.ignore_descriptions,
            breaking_only=options.breaking_only,
        ),
        breaking_changes=correlate_breaking_changes(findings),
    )

    if not version_diff.has_changes():
        return None

    return version_diff


def compare_crds(base: CRD, revision: CRD, options: Optional[CompareOptions] = None) -> CRDDiff:
    """Compare two revisions of the same CRD.

    Raises:
        IdentityMismatchError: if the CRDs have different identities
        DuplicateVersionError: if either CRD repeats a version name
        ComparisonError: if a version comparison fails
    """
    options = options or CompareOptions()

    if base.identifier() != revision.identifier():
        raise IdentityMismatchError(base.identifier(), revision.identifier())

    general: List[Change] = []
    if base.scope() != revision.scope():
        general.append(
            Change(
                breaking=True,
                description=f'changed scope from "{base.scope()}" to "{revision.scope()}"',
            )
        )

    match = match_versions(
        base.versions(),
        revision.versions(),
        allowed=options.versions,
        breaking_only=options.breaking_only,
    )

    changed = {}
    for version in match.common:
        version_diff = compare_version(base, revision, version, options)
        if version_diff is not None:
            changed[version] = version_diff

    return CRDDiff(
        general=general,
        added_versions=list(match.added),
        deleted_versions=list(match.deleted),
        changed_versions=changed,
    )


def removed_crd_diff() -> CRDDiff:
    return CRDDiff(general=[Change(breaking=True, description=CRD_REMOVED)])


def added_crd_diff() -> CRDDiff:
    return CRDDiff(general=[Change(breaking=False, description=CRD_ADDED)])
