from core.member_set import MemberSet


def test_member_set_deduplicates_case_insensitively():
    members = MemberSet()

    assert members.add("a@x.com") is True
    assert members.add("A@X.COM") is False

    assert len(members) == 1
    assert "A@x.Com" in members


def test_member_set_keeps_first_seen_casing():
    members = MemberSet(["Alice@Contoso.com", "alice@contoso.com"])

    assert list(members) == ["Alice@Contoso.com"]
    assert members.get("ALICE@CONTOSO.COM") == "Alice@Contoso.com"


def test_member_set_preserves_insertion_order():
    members = MemberSet(["z@x.com", "a@x.com", "m@x.com"])

    assert list(members) == ["z@x.com", "a@x.com", "m@x.com"]


def test_member_set_update_returns_new_count():
    members = MemberSet(["a@x.com"])

    assert members.update(["A@x.com", "b@x.com", "c@x.com", "B@X.com"]) == 2
    assert len(members) == 3


def test_member_set_ignores_empty_identifiers():
    members = MemberSet()

    assert members.add("") is False
    assert len(members) == 0
    assert members.get("") is None


def test_member_set_sorted_is_ordinal_case_insensitive():
    members = MemberSet(["bob@x.com", "Alice@x.com", "carol@x.com", "ALBERT@x.com"])

    assert members.sorted() == ["ALBERT@x.com", "Alice@x.com", "bob@x.com", "carol@x.com"]


def test_member_set_sorted_uses_ordinal_not_locale_order():
    # Ordinal ignore-case compares upper-cased code points, so '_' (0x5F) sorts after letters
    members = MemberSet(["a_b@x.com", "aZ@x.com"])

    assert members.sorted() == ["aZ@x.com", "a_b@x.com"]


def test_member_set_contains_rejects_non_strings():
    members = MemberSet(["a@x.com"])

    assert None not in members
    assert 1 not in members


def test_member_set_equality_ignores_case_and_order():
    assert MemberSet(["a@x.com", "B@x.com"]) == MemberSet(["b@X.com", "A@x.com"])
    assert MemberSet(["a@x.com"]) != MemberSet(["b@x.com"])
