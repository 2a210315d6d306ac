"""Exception hierarchy for crdiff.

Every error raised by the loader or the comparison engine derives from
CRDiffError (itself a ValueError) and carries an ErrorCode, so callers can
branch on ``exc.code`` instead of parsing messages.
"""

from typing import Optional

from crdiff.codes import ErrorCode


class CRDiffError(ValueError):
    """Base class for all crdiff errors."""

    code: ErrorCode = ErrorCode.COMPARISON_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class LoadError(CRDiffError):
    """A CRD source could not be loaded."""

    code = ErrorCode.MALFORMED_DOCUMENT

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        source: Optional[str] = None,
        document: Optional[int] = None,
    ):
        self.source = source
        self.document = document

        location = []
        if source is not None:
            location.append(source)
        if document is not None:
            location.append(f"document {document}")
        if location:
            message = f"{', '.join(location)}: {message}"

        super().__init__(message, code)


class DuplicateVersionError(CRDiffError):
    """A CRD defines the same version name more than once."""

    code = ErrorCode.DUPLICATE_VERSION

    def __init__(self, identifier: str, version: str):
        self.identifier = identifier
        self.version = version
        super().__init__(f"{identifier} defines version {version!r} multiple times")


class DuplicateIdentityError(LoadError):
    """A single source defines the same CRD identity more than once."""

    code = ErrorCode.DUPLICATE_IDENTITY

    def __init__(self, identifier: str, source: Optional[str] = None):
        self.identifier = identifier
        super().__init__(f"found multiple definitions of {identifier}", source=source)


class IdentityMismatchError(CRDiffError):
    """Two different CRDs were passed into a single comparison."""

    code = ErrorCode.IDENTITY_MISMATCH

    def __init__(self, base: str, revision: str):
        self.base = base
        self.revision = revision
        super().__init__(f"cannot compare two different CRDs ({base!r} vs. {revision!r})")


class ComparisonError(CRDiffError):
    """The differencer or the compatibility checker failed on one version."""

    code = ErrorCode.COMPARISON_FAILED

    def __init__(self, identifier: str, version: str, phase: str, cause: Exception):
        self.identifier = identifier
        self.version = version
        self.phase = phase
        self.cause = cause
        super().__init__(f"failed to {phase} version {version} of {identifier}: {cause}")
