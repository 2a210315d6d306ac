"""crdiff: compare Kubernetes CustomResourceDefinitions and classify changes."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("crdiff")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from crdiff.api import DiffResult, breaking, compare, diff, load, render
from crdiff.codes import ErrorCode, FindingId, Level
from crdiff.errors import (
    ComparisonError,
    CRDiffError,
    DuplicateIdentityError,
    DuplicateVersionError,
    IdentityMismatchError,
    LoadError,
)
from crdiff.kernel.compare import CompareOptions
from crdiff.kernel.report import Report

__all__ = [
    "__version__",
    "breaking",
    "compare",
    "diff",
    "load",
    "render",
    "CompareOptions",
    "DiffResult",
    "Report",
    "ErrorCode",
    "FindingId",
    "Level",
    "CRDiffError",
    "LoadError",
    "DuplicateVersionError",
    "DuplicateIdentityError",
    "IdentityMismatchError",
    "ComparisonError",
]
