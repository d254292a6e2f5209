import pytest

from doggos.models import Dog
from doggos.roster import DuplicateNameError, MatchPolicy, RosterStore


def make_roster(policy=MatchPolicy.PREFIX):
    return RosterStore(
        [
            Dog(name="Rex", is_liked=True),
            Dog(name="Ann"),
            Dog(name="Bo", is_liked=True),
        ],
        match_policy=policy,
    )


def test_add_rejects_name_differing_only_in_case():
    roster = make_roster()
    before = list(roster.derived_view())

    with pytest.raises(DuplicateNameError) as excinfo:
        roster.add(Dog(name="rEX", breed="Husky"))

    assert excinfo.value.name == "rEX"
    assert excinfo.value.existing == "Rex"
    assert isinstance(excinfo.value, ValueError)
    assert len(roster) == 3
    assert roster.derived_view() == before


def test_add_unique_name_grows_by_one_and_keeps_casing():
    roster = make_roster()
    dog = Dog(name="ziggy", breed="Mutt", image_url="https://example.com/z.jpg")

    roster.add(dog)

    assert len(roster) == 4
    assert roster.get("ziggy") == dog
    assert roster.get("Ziggy") is None
    assert roster.find("ZIGGY") == dog
    assert "ziggy" in roster


def test_remove_absent_name_is_noop():
    roster = make_roster()
    before = roster.derived_view()

    roster.remove("Nobody")
    roster.remove("rex")

    assert len(roster) == 3
    assert roster.derived_view() == before


def test_remove_exact_name():
    roster = make_roster()
    roster.remove("Rex")
    assert roster.get("Rex") is None
    assert len(roster) == 2


def test_derived_view_orders_liked_then_unliked_by_name():
    roster = make_roster()
    assert [d.name for d in roster.derived_view("")] == ["Bo", "Rex", "Ann"]


def test_derived_view_sorts_by_ordinal_name():
    roster = RosterStore([Dog(name="bella"), Dog(name="Zed"), Dog(name="Ace")])
    assert [d.name for d in roster.derived_view()] == ["Ace", "Zed", "bella"]


def test_derived_view_prefix_filter_is_case_insensitive_subsequence():
    roster = make_roster()
    roster.add(Dog(name="Rosie"))
    roster.add(Dog(name="Barry"))
    full = roster.derived_view()

    filtered = roster.derived_view("r")

    assert [d.name for d in filtered] == ["Rex", "Rosie"]
    assert [d for d in full if d in filtered] == filtered


def test_derived_view_contains_policy():
    roster = make_roster(MatchPolicy.CONTAINS)
    roster.add(Dog(name="Barry"))

    assert [d.name for d in roster.derived_view("R")] == ["Rex", "Barry"]
    assert [d.name for d in roster.derived_view("o")] == ["Bo"]


def test_prefix_policy_excludes_inner_matches():
    roster = make_roster()
    roster.add(Dog(name="Barry"))
    assert [d.name for d in roster.derived_view("rr")] == []


def test_derived_view_is_fresh_and_idempotent():
    roster = make_roster()
    first = roster.derived_view("b")
    first.clear()
    assert roster.derived_view("b") == roster.derived_view("b")
    assert [d.name for d in roster.derived_view("b")] == ["Bo"]


def test_toggle_liked_twice_restores_entry():
    roster = make_roster()
    original = roster.get("Ann")

    roster.toggle_liked("Ann")
    assert roster.get("Ann").is_liked is True
    assert [d.name for d in roster.derived_view()] == ["Ann", "Bo", "Rex"]

    roster.toggle_liked("Ann")
    assert roster.get("Ann") == original


def test_toggle_liked_absent_is_noop():
    roster = make_roster()
    before = roster.derived_view()
    roster.toggle_liked("ann")
    assert roster.derived_view() == before


def test_liked_count():
    roster = make_roster()
    assert roster.liked_count() == 2
    assert roster.liked_count(roster.derived_view("a")) == 0


def test_match_policy_parse():
    assert MatchPolicy.parse("Contains") is MatchPolicy.CONTAINS
    assert MatchPolicy.parse("") is MatchPolicy.PREFIX
    assert MatchPolicy.parse(None, MatchPolicy.CONTAINS) is MatchPolicy.CONTAINS
    with pytest.raises(ValueError, match="Unknown match policy"):
        MatchPolicy.parse("fuzzy")


def test_constructor_rejects_duplicate_seed():
    with pytest.raises(DuplicateNameError):
        RosterStore([Dog(name="Rex"), Dog(name="REX")])
