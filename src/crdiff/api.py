"""Public API for crdiff.

High-level functions that load two CRD snapshots, compare them and render
the result. Clients should use these functions instead of importing from
_internal.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from crdiff._internal.io.loader import LoaderOptions, load_crds
from crdiff._internal.logging import get_logger
from crdiff._internal.reporting.render_json import render_json
from crdiff._internal.reporting.render_text import render_text
from crdiff.kernel.compare import CompareOptions
from crdiff.kernel.crd import CRD
from crdiff.kernel.report import Report, compare_crd_sets

_log = get_logger("api")

Source = Union[str, os.PathLike, Path, Mapping[str, CRD]]
OutputFormat = Literal["text", "json"]


class DiffResult(BaseModel):
    """Stable result model of a comparison run."""
    report: Report
    breaking_only: bool
    has_changes: bool
    has_breaking_changes: bool

    model_config = ConfigDict(frozen=True)


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def load(source: Union[str, os.PathLike, Path], options: Optional[LoaderOptions] = None) -> Dict[str, CRD]:
    """Load every CRD found in a file or directory, keyed by identifier."""
    return load_crds(_normalize_path(source), options)


def _resolve(source: Source, role: str, options: Optional[LoaderOptions]) -> Mapping[str, CRD]:
    if isinstance(source, Mapping):
        return source
    _log.debug("loading_crds", role=role, source=str(source))
    return load(source, options)


def compare(
    base: Source,
    revision: Source,
    options: Optional[CompareOptions] = None,
    loader_options: Optional[LoaderOptions] = None,
) -> Report:
    """Compare two CRD snapshots.

    Args:
        base: Path to a file/directory, or an already loaded identifier -> CRD mapping
        revision: Same for the revision snapshot
        options: Comparison options
        loader_options: Options used when a snapshot has to be loaded

    Returns:
        Report keyed by CRD identifier

    Raises:
        CRDiffError: on any load or comparison failure
    """
    base_crds = _resolve(base, "base", loader_options)
    revision_crds = _resolve(revision, "revision", loader_options)

    _log.debug("comparing_crds", base=len(base_crds), revision=len(revision_crds))
    return compare_crd_sets(base_crds, revision_crds, options)


def _result(report: Report, breaking_only: bool) -> DiffResult:
    return DiffResult(
        report=report,
        breaking_only=breaking_only,
        has_changes=report.has_changes(),
        has_breaking_changes=report.has_breaking_changes(),
    )


def diff(
    base: Source,
    revision: Source,
    versions: Optional[Iterable[str]] = None,
    ignore_descriptions: bool = False,
    include_unchanged: bool = False,
    include_added_crds: bool = False,
) -> DiffResult:
    """
    Full comparison: every change, breaking or not.
    """
    options = CompareOptions(
        versions=tuple(versions or ()),
        ignore_descriptions=ignore_descriptions,
        include_unchanged=include_unchanged,
        include_added_crds=include_added_crds,
    )
    return _result(compare(base, revision, options), breaking_only=False)


def breaking(
    base: Source,
    revision: Source,
    versions: Optional[Iterable[str]] = None,
    ignore_descriptions: bool = False,
    include_unchanged: bool = False,
) -> DiffResult:
    """
    Breaking-only comparison: added versions and added properties are
    left out. Rendered as text, only breaking changes are shown.
    """
    options = CompareOptions(
        versions=tuple(versions or ()),
        breaking_only=True,
        ignore_descriptions=ignore_descriptions,
        include_unchanged=include_unchanged,
    )
    return _result(compare(base, revision, options), breaking_only=True)


def render(report: Report, output: OutputFormat = "text", breaking_only: bool = False) -> str:
    """Render a report as ``text`` or ``json``."""
    if output == "json":
        return render_json(report)
    if output == "text":
        return render_text(report, breaking_only=breaking_only)
    raise ValueError(f"unknown output format {output!r}")
