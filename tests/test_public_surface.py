"""Test public API surface - ensure imports work correctly and no side effects.

This test verifies:
- crdiff exposes the API functions, result models and codes at the top level
- _internal is not advertised as public API
- importing the package does not configure logging
"""

import types

import pytest


def test_api_exports_core_functions():
    """Test that crdiff.api exports the comparison entrypoints."""
    from crdiff.api import breaking, compare, diff, load, render

    for func in (breaking, compare, diff, load, render):
        assert isinstance(func, types.FunctionType)


def test_root_reexports_api():
    import crdiff
    import crdiff.api

    assert crdiff.diff is crdiff.api.diff
    assert crdiff.breaking is crdiff.api.breaking
    assert isinstance(crdiff.diff, types.FunctionType)

    for name in crdiff.__all__:
        assert hasattr(crdiff, name), name


def test_version_is_set():
    import crdiff

    assert isinstance(crdiff.__version__, str)
    assert crdiff.__version__


def test_internal_not_in_public_namespace():
    import crdiff

    assert "_internal" not in crdiff.__all__
    assert "kernel" not in crdiff.__all__


def test_errors_are_value_errors():
    from crdiff import CRDiffError, ErrorCode, LoadError

    error = LoadError("boom", code=ErrorCode.INVALID_CRD, source="a.yaml", document=2)
    assert isinstance(error, CRDiffError)
    assert isinstance(error, ValueError)
    assert str(error) == "a.yaml, document 2: boom"
    assert error.code == ErrorCode.INVALID_CRD


def test_compare_options_reject_unknown_fields():
    from pydantic import ValidationError

    from crdiff import CompareOptions

    with pytest.raises(ValidationError):
        CompareOptions(colour=True)

    options = CompareOptions()
    with pytest.raises(ValidationError):
        options.breaking_only = True
