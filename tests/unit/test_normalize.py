import pytest

from comicstop.domain.entities import ContributorGroup
from comicstop.domain.errors import ErrorKind
from comicstop.domain.normalize import (
    coerce_bool,
    normalize_page_order,
    normalize_string_list,
    normalize_tags,
    parse_contributor_groups,
)


class TestStringLists:
    def test_none_is_empty(self):
        assert normalize_string_list(None) == []

    def test_json_text_is_decoded(self):
        assert normalize_string_list('["a", " b ", ""]') == ["a", "b"]

    def test_plain_text_is_one_item(self):
        assert normalize_string_list("  pages/1.png ") == ["pages/1.png"]
        assert normalize_string_list("   ") == []

    def test_comma_text_when_asked(self):
        assert normalize_string_list("a, b,,c", split_commas=True) == ["a", "b", "c"]
        assert normalize_string_list("a, b") == ["a, b"]

    def test_broken_json_is_treated_as_text(self):
        assert normalize_string_list("[not json") == ["[not json"]

    def test_scalar_values(self):
        assert normalize_string_list(7) == ["7"]


def test_page_order_keeps_order_and_duplicates():
    assert normalize_page_order(["p2", "p1", "p2"]) == ["p2", "p1", "p2"]
    assert normalize_page_order('["p1","p2"]') == ["p1", "p2"]


def test_tags_dedupe_case_insensitively():
    assert normalize_tags("Action, action, Sci-Fi , ACTION") == ["Action", "Sci-Fi"]
    assert normalize_tags(["noir", "Noir", " western "]) == ["noir", "western"]


class TestContributorGroups:
    def test_rows_become_groups(self):
        groups, errors = parse_contributor_groups(
            [
                {"role": "Writer", "names": ["Ana", "Ben"]},
                {"role": " Artist ", "names": "Cy"},
            ]
        )
        assert errors == []
        assert groups == [
            ContributorGroup(role="Writer", names=["Ana", "Ben"]),
            ContributorGroup(role="Artist", names=["Cy"]),
        ]

    def test_json_text(self):
        groups, errors = parse_contributor_groups('[{"role": "Inker", "names": ["Dee"]}]')
        assert errors == []
        assert groups[0].role == "Inker"

    def test_mapping_of_role_to_names(self):
        groups, _ = parse_contributor_groups({"Letterer": ["Eve"], "Colorist": ["Fay"]})
        assert [g.role for g in groups] == ["Letterer", "Colorist"]

    def test_empty_rows_are_dropped(self):
        groups, errors = parse_contributor_groups([{"role": "", "names": []}, {}])
        assert groups == []
        assert errors == []

    def test_role_only_row_is_kept(self):
        groups, errors = parse_contributor_groups([{"role": "Editor"}])
        assert errors == []
        assert groups == [ContributorGroup(role="Editor", names=[])]

    def test_names_without_role(self):
        groups, errors = parse_contributor_groups(
            [{"role": "Writer", "names": ["Ana"]}, {"role": "  ", "names": ["Ghost"]}]
        )
        assert len(groups) == 1
        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.CONTRIBUTOR_ROLE_MISSING
        assert errors[0].field == "contributors[1].role"

    def test_unparseable_text(self):
        groups, errors = parse_contributor_groups("Ana and Ben")
        assert groups == []
        assert errors[0].kind == ErrorKind.CONTRIBUTOR_ROLE_MISSING


@pytest.mark.parametrize(
    "raw,expected",
    [
        (True, True),
        ("true", True),
        ("On", True),
        ("0", False),
        ("", False),
        (0, False),
        (None, None),
    ],
)
def test_coerce_bool(raw, expected):
    assert coerce_bool(raw) is expected


def test_coerce_bool_rejects_junk():
    with pytest.raises(ValueError):
        coerce_bool("maybe")
