"""Tests for text and JSON rendering of reports."""

import json

from conftest import make_crd, widget_schema
from crdiff._internal.reporting.indent import Indenter
from crdiff._internal.reporting.render_json import render_json
from crdiff._internal.reporting.render_text import render_text
from crdiff.kernel.compare import CompareOptions
from crdiff.kernel.models import Change, CRDDiff, CRDSchemaDiff, CRDVersionDiff
from crdiff.kernel.report import Report, compare_crd_sets
from crdiff.kernel.schema_diff import SchemaDiff, ValueDiff

WIDGET = "group.example.com/Widget"


def _widget_report(options=None):
    revision_schema = widget_schema()
    spec = revision_schema["properties"]["spec"]
    spec["properties"]["replicas"] = {"type": "integer"}
    spec["required"] = ["size", "replicas"]

    base = make_crd({"v1": widget_schema()})
    revision = make_crd({"v1": revision_schema, "v2": widget_schema()})
    return compare_crd_sets({WIDGET: base}, {WIDGET: revision}, options)


def test_empty_report_renders_valid_json():
    rendered = render_json(Report())
    assert rendered == '{"diffs":{}}'
    assert json.loads(rendered) == {"diffs": {}}


def test_json_uses_wire_field_names():
    data = json.loads(render_json(_widget_report()))

    assert data == {
        "diffs": {
            WIDGET: {
                "added": ["v2"],
                "changed": {
                    "v1": {
                        "schemaChanges": {
                            ".spec": {
                                "added": ["replicas"],
                                "changes": {"required": {"added": ["replicas"]}},
                            },
                        },
                        "breakingChanges": [
                            {
                                "id": "new-required-request-property",
                                "level": "error",
                                "details": {"path": ".spec.replicas"},
                                "message": "added the new required property .spec.replicas",
                            },
                        ],
                    },
                },
            },
        },
    }


def test_json_keeps_unset_values_in_value_diffs():
    report = Report(diffs={
        WIDGET: CRDDiff(changed_versions={
            "v1": CRDVersionDiff(schema_changes={
                ".": CRDSchemaDiff(diff=SchemaDiff(pattern_diff=ValueDiff(from_=None, to="^a"))),
            }),
        }),
    })
    data = json.loads(render_json(report))
    assert data["diffs"][WIDGET]["changed"]["v1"]["schemaChanges"]["."] == {
        "changes": {"pattern": {"from": None, "to": "^a"}},
    }


def test_json_general_change_keeps_breaking_flag():
    report = Report(diffs={WIDGET: CRDDiff(general=[Change(breaking=False, description="CRD has been added")])})
    data = json.loads(render_json(report))
    assert data["diffs"][WIDGET] == {"generalChanges": [{"breaking": False, "description": "CRD has been added"}]}


def test_text_layout():
    expected = "\n".join([
        WIDGET,
        "=" * len(WIDGET),
        "",
        "  + added v2",
        "",
        "  v1",
        "  --",
        "",
        "    .spec:",
        "      + added replicas",
        '      ~ requires ["replicas"]',
        "",
        "    breaking changes:",
        "      ! error: added the new required property .spec.replicas (new-required-request-property)",
    ])
    assert render_text(_widget_report()) == expected


def test_text_breaking_only_hides_added_versions():
    rendered = render_text(_widget_report(CompareOptions(breaking_only=True)), breaking_only=True)
    assert "+ added v2" not in rendered
    assert "+ added replicas" not in rendered
    assert "! error: added the new required property .spec.replicas" in rendered


def test_breaking_only_text_hides_crds_without_breaking_changes():
    schema = widget_schema()
    schema["properties"]["spec"]["properties"]["ports"]["uniqueItems"] = True

    base = make_crd({"v1": widget_schema()})
    revision = make_crd({"v1": schema})
    report = compare_crd_sets({WIDGET: base}, {WIDGET: revision}, CompareOptions(breaking_only=True))

    assert render_text(report, breaking_only=True) == ""
    data = json.loads(render_json(report))
    assert data["diffs"][WIDGET]["changed"]["v1"]["schemaChanges"][".spec.ports"] == {
        "changes": {"uniqueItems": {"from": None, "to": True}},
    }


def test_text_value_changes():
    diff = SchemaDiff(
        type_diff=ValueDiff(from_="string", to="integer"),
        max_length_diff=ValueDiff(from_=None, to=10),
        pattern_diff=ValueDiff(from_="^a", to=None),
    )
    report = Report(diffs={
        WIDGET: CRDDiff(
            general=[Change(breaking=True, description='changed scope from "Namespaced" to "Cluster"')],
            deleted_versions=["v1alpha1"],
            changed_versions={"v1": CRDVersionDiff(schema_changes={".spec.name": CRDSchemaDiff(diff=diff)})},
        ),
    })

    rendered = render_text(report)
    assert '  ~ changed scope from "Namespaced" to "Cluster"' in rendered
    assert "  - removed v1alpha1" in rendered
    assert "      ~ changed type from string to integer" in rendered
    assert "      ~ set maximum allowed length to 10" in rendered
    assert "      ~ removed pattern" in rendered


def test_rendering_is_deterministic():
    crds_base = {}
    crds_revision = {}
    for kind in ["Zebra", "Apple", "Mango"]:
        base = make_crd({"v2": widget_schema(), "v1": widget_schema()}, kind=kind)
        schema = widget_schema()
        schema["properties"]["spec"]["properties"]["size"]["enum"] = ["small"]
        revision = make_crd({"v1": schema, "v2": schema}, kind=kind, scope="Cluster")
        crds_base[base.identifier()] = base
        crds_revision[revision.identifier()] = revision

    first = compare_crd_sets(crds_base, crds_revision)
    second = compare_crd_sets(dict(reversed(list(crds_base.items()))), crds_revision)

    assert render_text(first) == render_text(second)
    assert render_json(first) == render_json(second)
    assert render_text(first) == render_text(first)

    text = render_text(first)
    assert text.index("Apple") < text.index("Mango") < text.index("Zebra")


def test_empty_report_renders_empty_text():
    assert render_text(Report()) == ""


def test_indenter():
    inner = Indenter()
    inner.add_line("child")

    outer = Indenter()
    outer.add_line("parent").indent().add(inner).add_line("").dedent().dedent()
    outer.add_line("a\nb")

    assert str(outer) == "parent\n  child\n\na\nb"
    assert not outer.empty()
    assert Indenter().add_line("   ").empty()
