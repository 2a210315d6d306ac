"""Tests for loading CRDs from files and directories."""

import json

import pytest
import yaml

from crdiff._internal.io.loader import LoaderOptions, _CRDYamlLoader, load_crds
from crdiff._internal.reporting.render_json import render_json
from crdiff.codes import ErrorCode
from crdiff.errors import DuplicateIdentityError, LoadError
from crdiff.kernel.crd import CRDV1, CRDV1beta1
from crdiff.kernel.report import compare_crd_sets


def test_directory_walk(testdata):
    crds = load_crds(testdata / "base")

    # README.txt is ignored, the ConfigMap is skipped
    assert list(crds) == [
        "group.example.com/Gadget",
        "group.example.com/Gizmo",
        "group.example.com/Widget",
    ]
    assert crds["group.example.com/Gadget"].scope() == "Cluster"
    assert isinstance(crds["group.example.com/Widget"], CRDV1)


def test_json_files_are_read(testdata):
    crds = load_crds(testdata / "revision")
    assert list(crds) == ["group.example.com/Gadget", "group.example.com/Widget"]
    assert crds["group.example.com/Gadget"].scope() == "Namespaced"
    assert crds["group.example.com/Widget"].versions() == ["v1", "v2"]


def test_single_file(testdata):
    crds = load_crds(str(testdata / "base" / "widgets.yaml"))
    widget = crds["group.example.com/Widget"]

    schema = widget.schema("v1")
    assert schema.properties["spec"].required == ["size"]


def test_extension_filter_only_applies_to_directories(testdata):
    assert load_crds(testdata / "revision", LoaderOptions(file_extensions=("yaml",))).keys() == {
        "group.example.com/Widget",
    }
    # explicit files are read regardless of their extension
    assert list(load_crds(testdata / "revision" / "gadgets.json", LoaderOptions(file_extensions=("yaml",)))) == [
        "group.example.com/Gadget",
    ]


def test_legacy_v1beta1(testdata):
    crds = load_crds(testdata / "legacy_v1beta1.yaml")
    legacy = crds["group.example.com/Legacy"]

    assert isinstance(legacy, CRDV1beta1)
    assert legacy.scope() == "Namespaced"
    assert legacy.versions() == ["v1beta1"]
    assert "mode" in legacy.schema("v1beta1").properties["spec"].properties


def test_timestamps_stay_strings():
    data = yaml.load("created: 2023-05-01T10:00:00Z\nday: 2023-05-01\n", Loader=_CRDYamlLoader)
    assert data == {"created": "2023-05-01T10:00:00Z", "day": "2023-05-01"}

    # the stock loader is untouched
    assert not isinstance(yaml.safe_load("day: 2023-05-01\n")["day"], str)


def test_non_string_keys_use_json_spelling():
    data = yaml.load("{1: a, b: c, true: d, null: e, 1.5: f}", Loader=_CRDYamlLoader)
    assert data == {"1": "a", "b": "c", "true": "d", "null": "e", "1.5": "f"}


def test_non_string_keys_in_schema_values(tmp_path, testdata):
    document = (testdata / "base" / "widgets.yaml").read_text()
    document = document.replace(
        "                size:\n                  type: string\n",
        "                size:\n                  type: string\n"
        "                  default: {1: one, b: two}\n",
    )
    path = tmp_path / "widgets.yaml"
    path.write_text(document)

    crds = load_crds(path)
    size = crds["group.example.com/Widget"].schema("v1").properties["spec"].properties["size"]
    assert size.default == {"1": "one", "b": "two"}

    report = compare_crd_sets(load_crds(testdata / "base" / "widgets.yaml"), crds)
    change = report.diffs["group.example.com/Widget"].changed_versions["v1"].schema_changes[".spec.size"]
    assert change.diff.default_diff.to == {"1": "one", "b": "two"}
    assert json.loads(render_json(report))


def test_empty_documents_are_skipped(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("---\n---\n# nothing here\n")
    assert load_crds(path) == {}


def test_empty_directory(tmp_path):
    assert load_crds(tmp_path) == {}


def test_missing_source(tmp_path):
    with pytest.raises(LoadError) as excinfo:
        load_crds(tmp_path / "nope")
    assert excinfo.value.code == ErrorCode.SOURCE_NOT_FOUND


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(LoadError) as excinfo:
        load_crds(path)
    assert excinfo.value.code == ErrorCode.MALFORMED_DOCUMENT
    assert excinfo.value.document == 1


def test_duplicate_identity_across_files(tmp_path, testdata):
    for name in ["a.yaml", "b.yaml"]:
        (tmp_path / name).write_text((testdata / "base" / "widgets.yaml").read_text())

    with pytest.raises(DuplicateIdentityError) as excinfo:
        load_crds(tmp_path)
    assert excinfo.value.identifier == "group.example.com/Widget"
    assert excinfo.value.source.endswith("b.yaml")


@pytest.mark.parametrize(
    "filename, code, document",
    [
        ("duplicate_identity.yaml", ErrorCode.DUPLICATE_IDENTITY, None),
        ("duplicate_version.yaml", ErrorCode.DUPLICATE_VERSION, 1),
        ("unknown_api_version.yaml", ErrorCode.UNRECOGNIZED_API_VERSION, 1),
        ("malformed.yaml", ErrorCode.MALFORMED_DOCUMENT, 1),
        ("missing_group.yaml", ErrorCode.INVALID_CRD, 1),
    ],
)
def test_invalid_sources(testdata, filename, code, document):
    path = testdata / "invalid" / filename

    with pytest.raises(LoadError) as excinfo:
        load_crds(path)

    error = excinfo.value
    assert error.code == code
    assert error.source == str(path)
    assert error.document == document
    assert str(path) in str(error)


def test_invalid_directory_fails_as_a_whole(testdata):
    with pytest.raises(LoadError):
        load_crds(testdata / "invalid")
