"""Pytest configuration and shared builders for tests.

No sys.path hacks - tests import from the installed crdiff package.
"""

import copy
from pathlib import Path

import pytest

from crdiff._internal.logging import setup_logging
from crdiff.kernel.crd import parse_crd

TESTDATA = Path(__file__).resolve().parent / "testdata"


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance sentinel benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep library debug logs off stdout; CLI tests reconfigure via main()."""
    setup_logging("warning")


def widget_schema():
    """A small but nested Widget schema (object, array items, map values)."""
    return {
        "type": "object",
        "description": "Widget is the Schema for the widgets API",
        "properties": {
            "apiVersion": {"type": "string"},
            "kind": {"type": "string"},
            "spec": {
                "type": "object",
                "properties": {
                    "size": {"type": "string", "enum": ["small", "medium", "large"]},
                    "ports": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string", "maxLength": 63},
                                "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                            },
                            "required": ["port"],
                        },
                    },
                    "labels": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                },
                "required": ["size"],
            },
        },
    }


def crd_document(
    versions,
    group="group.example.com",
    kind="Widget",
    scope="Namespaced",
    api_version="apiextensions.k8s.io/v1",
):
    """Build a CustomResourceDefinition document.

    Args:
        versions: Mapping of version name -> openAPIV3Schema (None for no schema)
    """
    plural = kind.lower() + "s"
    version_list = []
    for i, (name, schema) in enumerate(versions.items()):
        entry = {"name": name, "served": True, "storage": i == 0}
        if schema is not None:
            entry["schema"] = {"openAPIV3Schema": copy.deepcopy(schema)}
        version_list.append(entry)

    return {
        "apiVersion": api_version,
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{plural}.{group}"},
        "spec": {
            "group": group,
            "names": {"kind": kind, "plural": plural, "singular": kind.lower(), "listKind": f"{kind}List"},
            "scope": scope,
            "versions": version_list,
        },
    }


def make_crd(versions, **kwargs):
    """Build and parse a CRD (see crd_document)."""
    return parse_crd(crd_document(versions, **kwargs))


@pytest.fixture
def testdata():
    return TESTDATA
