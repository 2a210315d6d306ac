"""Render a Report as canonical JSON (internal)."""

from crdiff._internal.canonical_json import canonical_dumps
from crdiff.kernel.report import Report


def report_to_dict(report: Report) -> dict:
    """Plain JSON-compatible form of a report, using the wire field names."""
    return report.model_dump(mode="json", by_alias=True)


def render_json(report: Report) -> str:
    """Encode ``report`` as canonical JSON; an empty report is ``{"diffs":{}}``."""
    return canonical_dumps(report_to_dict(report))
