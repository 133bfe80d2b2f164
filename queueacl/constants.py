"""Grammar constants shared by the ACL parser and the queue configuration."""

from __future__ import annotations

WILDCARD = "*"
SPACE = " "
SEPARATOR = ","
DOT = "."
ROOT_QUEUE = "root"
