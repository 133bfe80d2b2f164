"""Queue policy loading and validation for queueacl."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import DOT, ROOT_QUEUE, SPACE
from .exceptions import BadPolicy

QUEUE_SEGMENT_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


def normalize_queue_name(name: str) -> str:
    """Lowercase and validate a dotted queue path such as ``root.batch``."""

    parts = name.strip().lower().split(DOT)
    for part in parts:
        if not QUEUE_SEGMENT_RE.fullmatch(part):
            raise ValueError(f"invalid queue name segment {part!r} in {name!r}")
    if parts[0] != ROOT_QUEUE:
        raise ValueError(f"queue {name!r} must be rooted at '{ROOT_QUEUE}'")
    return DOT.join(parts)


class QueueSettings(BaseModel):
    submit_acl: str = ""
    admin_acl: str = ""

    @field_validator("submit_acl", "admin_acl", mode="before")
    @classmethod
    def blank_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("submit_acl", "admin_acl")
    @classmethod
    def single_space(cls, value: str) -> str:
        if value.count(SPACE) > 1:
            raise ValueError(f"multiple spaces found in ACL: '{value}'")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    output: Literal["stderr", "file"] = "stderr"
    file_path: str = "queueacl.log"
    rotate_bytes: int = 10_485_760


class AuditSettings(BaseModel):
    enabled: bool = True
    silence_acl_warnings: bool = False


class Policy(BaseModel):
    version: int = 1
    queues: dict[str, QueueSettings] = Field(default_factory=dict)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)

    @field_validator("queues", mode="before")
    @classmethod
    def normalize_queues(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        normalized: dict[str, Any] = {}
        for name, settings in value.items():
            key = normalize_queue_name(str(name))
            if key in normalized:
                raise ValueError(f"duplicate queue {key!r}")
            normalized[key] = settings if settings is not None else {}
        return normalized

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Policy":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise BadPolicy(message=str(exc)) from exc


def load_policy(path: str | Path) -> Policy:
    """Load a policy from a YAML file."""

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - direct passthrough
        raise BadPolicy(message=f"Failed to read policy: {exc}") from exc
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise BadPolicy(message=f"Failed to parse policy YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise BadPolicy(message="Policy document must be a mapping")
    return Policy.from_dict(data)
