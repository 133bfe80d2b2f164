"""Structured audit logging of access decisions."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from .policy import LoggingSettings
from .types import AccessDecision, UserGroup

_handlers: dict[str, logging.Handler] = {}


def _handler_for(settings: LoggingSettings) -> logging.Handler:
    key = settings.file_path if settings.output == "file" else "<stderr>"
    handler = _handlers.get(key)
    if handler is None:
        if settings.output == "file":
            handler = RotatingFileHandler(
                settings.file_path,
                maxBytes=settings.rotate_bytes,
                backupCount=3,
            )
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        _handlers[key] = handler
    return handler


def _attach(logger: logging.Logger, settings: LoggingSettings) -> None:
    handler = _handler_for(settings)
    for existing in list(logger.handlers):
        if existing is not handler and existing in _handlers.values():
            logger.removeHandler(existing)
    if handler not in logger.handlers:
        logger.addHandler(handler)


def configure_logging(settings: LoggingSettings) -> None:
    """Route ACL parser messages to the configured output."""

    security = logging.getLogger("queueacl.security")
    _attach(security, settings)
    security.setLevel(getattr(logging, settings.level.upper(), logging.INFO))


class AuditLogger:
    """Writes access decisions as JSON lines."""

    def __init__(self, settings: LoggingSettings, policy_version: int) -> None:
        self.logger = logging.getLogger("queueacl.audit")
        _attach(self.logger, settings)
        self.logger.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
        self.policy_version = policy_version

    def log(self, *, identity: UserGroup, decision: AccessDecision) -> None:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "user": identity.user,
            "groups": list(identity.groups),
            "queue": decision.queue,
            "action": decision.action,
            "decision": "allow" if decision.allowed else "deny",
            "reason": decision.reason,
            "policy_version": self.policy_version,
        }
        self.logger.info(json.dumps(payload))
