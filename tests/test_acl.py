import logging

import pytest

from queueacl.acl import ACL, check_access, new_acl
from queueacl.exceptions import MalformedACL
from queueacl.types import UserGroup


def test_empty_acl_denies_everyone() -> None:
    acl = new_acl("")
    assert acl == ACL()
    assert not acl.all_allowed
    assert not acl.check_access(UserGroup("alice"))
    assert not acl.check_access(UserGroup("root", ("wheel", "admin")))


def test_wildcard_allows_everyone() -> None:
    acl = new_acl("*")
    assert acl.all_allowed
    assert acl.users == frozenset()
    assert acl.check_access(UserGroup("anyone"))
    assert acl.check_access(UserGroup("other", ("g1",)))


def test_users_and_groups() -> None:
    acl = new_acl("alice,bob groupA,groupB")
    assert acl.users == {"alice", "bob"}
    assert acl.groups == {"groupA", "groupB"}
    assert check_access(acl, UserGroup("alice"))
    assert check_access(acl, UserGroup("nobody", ("groupB",)))
    assert not check_access(acl, UserGroup("nobody", ("groupC",)))
    assert not check_access(acl, UserGroup("nobody"))


def test_group_wildcard_overrides_users() -> None:
    acl = new_acl("alice *")
    assert acl.all_allowed
    assert acl.users == frozenset()
    assert acl.check_access(UserGroup("mallory"))


def test_user_wildcard_ignores_groups(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="queueacl.security"):
        acl = new_acl("* groupA")
    assert acl.all_allowed
    assert acl.groups == frozenset()
    assert acl.check_access(UserGroup("mallory", ("groupZ",)))
    assert "ignoring group list in ACL: wildcard set" in caplog.text


def test_groups_only() -> None:
    acl = new_acl(" ops,dev")
    assert acl.users == frozenset()
    assert acl.groups == {"ops", "dev"}
    assert acl.check_access(UserGroup("bob", ("dev",)))
    assert not acl.check_access(UserGroup("ops"))


def test_trailing_space_means_no_groups() -> None:
    acl = new_acl("alice ")
    assert acl.users == {"alice"}
    assert acl.groups == frozenset()


def test_invalid_names_are_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="queueacl.security"):
        acl = new_acl("1bad,good")
    assert acl.users == {"good"}
    assert acl.check_access(UserGroup("good"))
    assert not acl.check_access(UserGroup("1bad"))
    assert "ignoring user in ACL definition" in caplog.text


def test_silence_warnings(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="queueacl.security"):
        acl = ACL.build("1bad,,good 2bad,ok", silence_warnings=True)
    assert acl.users == {"good"}
    assert acl.groups == {"ok"}
    assert caplog.records == []


@pytest.mark.parametrize(
    "name,valid",
    [
        ("alice", True),
        ("_svc", True),
        ("first.last@example.com", True),
        ("machine$", True),
        ("svc-account_01", True),
        ("1user", False),
        ("-user", False),
        ("user$x", False),
        ("alice\n", False),
    ],
)
def test_user_name_rules(name: str, valid: bool) -> None:
    acl = ACL.build(name, silence_warnings=True)
    assert (name in acl.users) == valid


@pytest.mark.parametrize(
    "name,valid",
    [
        ("analysts", True),
        ("_ops", True),
        ("team-a_2", True),
        ("team.a", False),
        ("team@a", False),
        ("team$", False),
        ("9team", False),
    ],
)
def test_group_name_rules(name: str, valid: bool) -> None:
    acl = ACL.build(f" {name}", silence_warnings=True)
    assert (name in acl.groups) == valid


@pytest.mark.parametrize("text", ["a b c", "alice  groupA", " alice groupA", "alice groupA ", "  "])
def test_multiple_spaces_are_malformed(text: str) -> None:
    with pytest.raises(MalformedACL) as info:
        new_acl(text)
    assert "multiple spaces found in ACL" in str(info.value)
    assert info.value.details == {"acl": text}
    assert info.value.http_status == 422


def test_evaluation_is_repeatable() -> None:
    acl = new_acl("alice groupA")
    identity = UserGroup("bob", ("groupA",))
    assert [acl.check_access(identity) for _ in range(5)] == [True] * 5


def test_acl_is_immutable() -> None:
    acl = new_acl("alice")
    with pytest.raises(AttributeError):
        acl.all_allowed = True  # type: ignore[misc]
    assert isinstance(acl.users, frozenset)


def test_str_and_to_dict() -> None:
    acl = new_acl("bob,alice ops")
    assert str(acl) == "alice,bob ops"
    assert acl.to_dict() == {"all_allowed": False, "users": ["alice", "bob"], "groups": ["ops"]}
    assert str(new_acl("x *")) == "*"
