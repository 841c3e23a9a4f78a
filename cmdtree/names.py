"""
Naming patterns shared with external validators.

These are data, not behavior: the dispatcher never enforces them. Hosts use
them to check repository-like identifiers such as "name" or "owner/name".

- NAME_PATTERN: a bare name (word characters and dots, then hyphens allowed).
- OWNER_PATTERN: an owner (alphanumeric start, then alphanumerics or hyphens).
- NAME_WITH_OWNER_PATTERN: anchored "name" or "owner/name".
"""
import re

NAME_PATTERN = r"[\w.][\w.-]*"
OWNER_PATTERN = r"[a-zA-Z0-9][a-zA-Z0-9-]*"
NAME_WITH_OWNER_PATTERN = r"^(?:%s|%s\/%s)$" % (NAME_PATTERN, OWNER_PATTERN, NAME_PATTERN)

# Compiled forms; the bare ones are anchored for fullmatch-style checks.
NAME = re.compile(r"^%s$" % NAME_PATTERN)
OWNER = re.compile(r"^%s$" % OWNER_PATTERN)
NAME_WITH_OWNER = re.compile(NAME_WITH_OWNER_PATTERN)


__all__ = (
    "NAME_PATTERN",
    "OWNER_PATTERN",
    "NAME_WITH_OWNER_PATTERN",
    "NAME",
    "OWNER",
    "NAME_WITH_OWNER",
)
