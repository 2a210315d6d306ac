"""Tests for version matching."""

from crdiff.kernel.versions import VersionMatch, limit_versions, match_versions


def test_match_splits_deleted_added_common():
    match = match_versions(["v1", "v1beta1"], ["v2", "v1"])
    assert match == VersionMatch(deleted=("v1beta1",), added=("v2",), common=("v1",))


def test_match_output_is_sorted():
    match = match_versions(["v3", "v1", "v2"], ["v2", "v3", "v1"])
    assert match.common == ("v1", "v2", "v3")
    assert match.added == ()
    assert match.deleted == ()


def test_breaking_only_never_reports_added_versions():
    match = match_versions(["v1"], ["v1", "v2"], breaking_only=True)
    assert match.added == ()
    assert match.common == ("v1",)


def test_breaking_only_still_reports_deleted_versions():
    match = match_versions(["v1", "v2"], ["v2"], breaking_only=True)
    assert match.deleted == ("v1",)


def test_allow_list_restricts_both_sides():
    match = match_versions(["v1", "v2"], ["v2", "v3"], allowed=["v2", "v3"])
    assert match.deleted == ()
    assert match.added == ("v3",)
    assert match.common == ("v2",)


def test_empty_allow_list_keeps_everything():
    assert limit_versions(["v1", "v2"], []) == {"v1", "v2"}
    assert limit_versions(["v1", "v2"], None) == {"v1", "v2"}
    assert limit_versions(["v1", "v2"], ["v2", "v9"]) == {"v2"}
