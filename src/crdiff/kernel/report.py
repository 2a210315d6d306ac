"""Aggregate per-CRD diffs into one report."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from crdiff.kernel.compare import CompareOptions, added_crd_diff, compare_crds, removed_crd_diff
from crdiff.kernel.crd import CRD
from crdiff.kernel.models import CRDDiff


class Report(BaseModel):
    """Result of one comparison run: CRD identity -> CRDDiff.

    ``diffs`` is always serialized, so an empty report still encodes as
    ``{"diffs": {}}``.
    """

    diffs: Dict[str, CRDDiff] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def has_changes(self) -> bool:
        return any(diff.has_changes() for diff in self.diffs.values())

    def has_breaking_changes(self) -> bool:
        return any(diff.has_breaking_changes() for diff in self.diffs.values())


def compare_crd_sets(
    base: Mapping[str, CRD],
    revision: Mapping[str, CRD],
    options: Optional[CompareOptions] = None,
) -> Report:
    """Compare every CRD of the base snapshot against the revision.

    A CRD missing from the revision is reported as removed. CRDs that only
    exist in the revision are left out unless ``include_added_crds`` is set.
    CRDs without changes are left out unless ``include_unchanged`` is set.
    Breaking-only mode keeps every remaining change in the report; the
    text renderer only shows CRDs and versions with breaking changes.

    Raises:
        CRDiffError: the first comparison failure; no partial report is returned
    """
    options = options or CompareOptions()
    diffs: Dict[str, CRDDiff] = {}

    for identifier in sorted(base):
        revision_crd = revision.get(identifier)
        if revision_crd is None:
            diffs[identifier] = removed_crd_diff()
            continue

        crd_diff = compare_crds(base[identifier], revision_crd, options)
        if options.include_unchanged or crd_diff.has_changes():
            diffs[identifier] = crd_diff

    if options.include_added_crds and not options.breaking_only:
        for identifier in sorted(set(revision) - set(base)):
            diffs[identifier] = added_crd_diff()

    return Report(diffs={identifier: diffs[identifier] for identifier in sorted(diffs)})
