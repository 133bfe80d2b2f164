"""Custom exceptions for queueacl."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class QueueACLException(Exception):
    """Base class for queueacl exceptions."""

    message: str
    http_status: int = 400
    details: dict[str, object] | None = None

    def __str__(self) -> str:  # pragma: no cover - dataclass str wrapper
        return self.message


@dataclass
class MalformedACL(QueueACLException):
    """Raised when an ACL string cannot be split into users and groups."""

    http_status: int = 422


@dataclass
class AccessDenied(QueueACLException):
    """Raised when an identity has no access to a queue."""

    http_status: int = 403


@dataclass
class BadPolicy(QueueACLException):
    """Raised when a policy file cannot be parsed or validated."""

    http_status: int = 422
