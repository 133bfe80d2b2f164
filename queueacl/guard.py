"""Queue access guard built from a policy."""

from __future__ import annotations

from typing import Iterator

from .acl import ACL
from .audit import AuditLogger
from .constants import DOT
from .exceptions import AccessDenied
from .policy import Policy, normalize_queue_name
from .types import AccessDecision, UserGroup

ACTIONS: tuple[str, ...] = ("submit", "admin")


def ancestors(queue: str) -> Iterator[str]:
    """Yield ``queue`` followed by each parent up to the root queue."""

    parts = queue.split(DOT)
    for end in range(len(parts), 0, -1):
        yield DOT.join(parts[:end])


class QueueGuard:
    """Answers submit and admin questions for dotted queue paths.

    Every ACL in the policy is built once, at construction. A queue's own
    ACLs and those of all its ancestors apply, and the admin ACL also
    grants submit access.
    """

    def __init__(self, policy: Policy, *, silence_warnings: bool | None = None) -> None:
        self.policy = policy
        if silence_warnings is None:
            silence_warnings = policy.audit.silence_acl_warnings
        self._submit: dict[str, ACL] = {}
        self._admin: dict[str, ACL] = {}
        for name, settings in policy.queues.items():
            self._submit[name] = ACL.build(settings.submit_acl, silence_warnings=silence_warnings)
            self._admin[name] = ACL.build(settings.admin_acl, silence_warnings=silence_warnings)
        self.audit = AuditLogger(policy.logging, policy.version) if policy.audit.enabled else None

    def submit_acl(self, queue: str) -> ACL:
        return self._submit.get(normalize_queue_name(queue), ACL())

    def admin_acl(self, queue: str) -> ACL:
        return self._admin.get(normalize_queue_name(queue), ACL())

    def _match(self, acls: dict[str, ACL], queue: str, identity: UserGroup) -> str | None:
        for name in ancestors(queue):
            acl = acls.get(name)
            if acl is not None and acl.check_access(identity):
                return name
        return None

    def check_admin(self, queue: str, identity: UserGroup) -> bool:
        return self.decide(queue, identity, "admin").allowed

    def check_submit(self, queue: str, identity: UserGroup) -> bool:
        return self.decide(queue, identity, "submit").allowed

    def decide(self, queue: str, identity: UserGroup, action: str) -> AccessDecision:
        if action not in ACTIONS:
            raise ValueError(f"unknown action {action!r}, expected one of {', '.join(ACTIONS)}")
        queue = normalize_queue_name(queue)
        decision = AccessDecision(allowed=False, reason="NoMatchingACL", queue=queue, action=action)
        if action == "submit":
            granted = self._match(self._submit, queue, identity)
            if granted is not None:
                decision = AccessDecision(
                    allowed=True, reason=f"submit ACL on {granted}", queue=queue, action=action
                )
        if not decision.allowed:
            granted = self._match(self._admin, queue, identity)
            if granted is not None:
                decision = AccessDecision(
                    allowed=True, reason=f"admin ACL on {granted}", queue=queue, action=action
                )
        if self.audit is not None:
            self.audit.log(identity=identity, decision=decision)
        return decision

    def require(self, queue: str, identity: UserGroup, action: str) -> AccessDecision:
        """Like :meth:`decide` but raises :class:`AccessDenied` on deny."""

        decision = self.decide(queue, identity, action)
        if not decision.allowed:
            raise AccessDenied(
                message=f"{identity.user} has no {action} access to {decision.queue}",
                details={"queue": decision.queue, "action": action, "user": identity.user},
            )
        return decision
