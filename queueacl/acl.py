"""User and group access control lists for queues."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .constants import SEPARATOR, SPACE, WILDCARD
from .exceptions import MalformedACL
from .types import UserGroup

logger = logging.getLogger("queueacl.security")

# Must accept at least what the queue configuration accepts.
USER_NAME_RE = re.compile(r"^[_a-zA-Z][a-zA-Z0-9_.@-]*[$]?$")
GROUP_NAME_RE = re.compile(r"^[_a-zA-Z][a-zA-Z0-9_-]*$")


@dataclass(frozen=True, slots=True)
class ACL:
    """Allow-list of users and groups, or a blanket allow-all.

    The textual form is ``<users>[ <groups>]``: a comma separated user list,
    optionally followed by a single space and a comma separated group list.
    ``*`` in either position allows everyone. An empty string allows nobody.
    """

    users: frozenset[str] = field(default_factory=frozenset)
    groups: frozenset[str] = field(default_factory=frozenset)
    all_allowed: bool = False

    @classmethod
    def build(cls, acl_str: str, *, silence_warnings: bool = False) -> "ACL":
        """Parse ``acl_str`` into an ACL.

        Invalid or empty user and group names are dropped and logged unless
        ``silence_warnings`` is set. Only a string with more than one space
        is rejected, with :class:`MalformedACL`.
        """

        if acl_str == "":
            return cls()
        # split before trimming: a leading or trailing space is a field boundary
        fields = acl_str.split(SPACE)
        if len(fields) > 2:
            raise MalformedACL(
                message=f"multiple spaces found in ACL: '{acl_str}'",
                details={"acl": acl_str},
            )
        all_allowed = acl_str.strip() == WILDCARD
        users, all_allowed = _parse_users(fields[0].split(SEPARATOR), all_allowed, silence_warnings)
        groups: set[str] = set()
        if len(fields) == 2:
            users, groups, all_allowed = _parse_groups(
                fields[1].split(SEPARATOR), users, all_allowed, silence_warnings
            )
        return cls(users=frozenset(users), groups=frozenset(groups), all_allowed=all_allowed)

    def check_access(self, identity: UserGroup) -> bool:
        if self.all_allowed:
            return True
        if identity.user in self.users:
            return True
        return any(group in self.groups for group in identity.groups)

    def __str__(self) -> str:
        if self.all_allowed:
            return WILDCARD
        text = SEPARATOR.join(sorted(self.users))
        if self.groups:
            text += SPACE + SEPARATOR.join(sorted(self.groups))
        return text

    def to_dict(self) -> dict[str, object]:
        return {
            "all_allowed": self.all_allowed,
            "users": sorted(self.users),
            "groups": sorted(self.groups),
        }


def _parse_users(user_list: list[str], all_allowed: bool, silence: bool) -> tuple[set[str], bool]:
    users: set[str] = set()
    if len(user_list) == 1 and user_list[0] == WILDCARD:
        if not silence:
            logger.info("user list is wildcard, allowing all access")
        return users, True
    for user in user_list:
        # empty when the ACL only lists groups
        if user == "":
            continue
        if USER_NAME_RE.fullmatch(user):
            users.add(user)
        elif not silence:
            logger.info("ignoring user in ACL definition: %r", user)
    return users, all_allowed


def _parse_groups(
    group_list: list[str], users: set[str], all_allowed: bool, silence: bool
) -> tuple[set[str], set[str], bool]:
    groups: set[str] = set()
    if all_allowed:
        if not silence:
            logger.info("ignoring group list in ACL: wildcard set")
        return users, groups, True
    if len(group_list) == 1 and group_list[0] == WILDCARD:
        if not silence:
            logger.info("group list is wildcard, allowing all access")
        return set(), groups, True
    for group in group_list:
        # empty when the ACL ends in a space
        if group == "":
            continue
        if GROUP_NAME_RE.fullmatch(group):
            groups.add(group)
        elif not silence:
            logger.info("ignoring group in ACL: %r", group)
    return users, groups, all_allowed


def new_acl(acl_str: str, silence_warnings: bool = False) -> ACL:
    """Build an ACL from its textual form."""

    return ACL.build(acl_str, silence_warnings=silence_warnings)


def check_access(acl: ACL, identity: UserGroup) -> bool:
    return acl.check_access(identity)
