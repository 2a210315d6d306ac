"""Match the versions of a base and a revision CRD."""

from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple


@dataclass(frozen=True)
class VersionMatch:
    """Result of matching two version sets. All members are sorted."""
    deleted: Tuple[str, ...]  # only in base
    added: Tuple[str, ...]  # only in revision (empty in breaking-only mode)
    common: Tuple[str, ...]  # in both, to be diffed


def limit_versions(all_versions: Iterable[str], allowed: Optional[Iterable[str]] = None) -> Set[str]:
    """Restrict a version set to an allow-list (no allow-list keeps everything)."""
    result = set(all_versions)
    allowed_set = set(allowed or ())
    if allowed_set:
        result &= allowed_set
    return result


def match_versions(
    base_versions: Iterable[str],
    revision_versions: Iterable[str],
    allowed: Optional[Iterable[str]] = None,
    breaking_only: bool = False,
) -> VersionMatch:
    """Split two version sets into deleted, added and common versions.

    A version addition is never breaking, so ``added`` stays empty when
    ``breaking_only`` is set.
    """
    base = limit_versions(base_versions, allowed)
    revision = limit_versions(revision_versions, allowed)

    added: Tuple[str, ...] = ()
    if not breaking_only:
        added = tuple(sorted(revision - base))

    return VersionMatch(
        deleted=tuple(sorted(base - revision)),
        added=added,
        common=tuple(sorted(base & revision)),
    )
