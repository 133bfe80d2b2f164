"""Shared data structures for queueacl."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True, slots=True)
class UserGroup:
    """Identity presented for an access check."""

    user: str
    groups: tuple[str, ...] = ()

    @classmethod
    def of(cls, user: str, groups: Iterable[str] | None = None) -> "UserGroup":
        return cls(user=user, groups=tuple(groups or ()))


@dataclass(slots=True)
class AccessDecision:
    """Result of a queue access check."""

    allowed: bool
    reason: str
    queue: str
    action: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "queue": self.queue,
            "action": self.action,
        }


@dataclass(slots=True)
class Metrics:
    """Simple counter metrics for the HTTP surface."""

    allowed: int = 0
    denied: int = 0
    errors: int = 0
    by_action: dict[str, int] = field(default_factory=dict)

    def record(self, decision: AccessDecision) -> None:
        if decision.allowed:
            self.allowed += 1
        else:
            self.denied += 1
        self.by_action[decision.action] = self.by_action.get(decision.action, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "denied": self.denied,
            "errors": self.errors,
            "by_action": dict(self.by_action),
        }
