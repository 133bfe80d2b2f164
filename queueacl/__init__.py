"""queueacl package providing user and group access control for scheduler queues."""

from .acl import ACL, check_access, new_acl
from .guard import QueueGuard
from .policy import Policy, load_policy
from .exceptions import AccessDenied, BadPolicy, MalformedACL
from .types import UserGroup

__all__ = [
    "ACL",
    "check_access",
    "new_acl",
    "QueueGuard",
    "Policy",
    "load_policy",
    "AccessDenied",
    "BadPolicy",
    "MalformedACL",
    "UserGroup",
]
