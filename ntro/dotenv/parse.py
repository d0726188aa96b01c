"""Line parser for dotenv-style files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import HintParseError
from ..logging import get_logger
from ..models import EnvVar, TypeHint
from .typehint import parse_type_hint

logger = get_logger("dotenv.parse")

_COMMENT = re.compile(r"^\s*#(?P<body>.*)$")
_HINT = re.compile(r"@type\s+(?P<expression>.*)$")
_ASSIGNMENT = re.compile(
    r"^\s*(?:export\s+)?(?P<key>[A-Za-z_$][A-Za-z0-9_$]*)\s*=\s*(?P<rest>.*)$"
)
_DOUBLE_QUOTED = re.compile(r'^"(?P<value>(?:[^"\\]|\\.)*)"\s*,?\s*(?:#.*)?$')
_SINGLE_QUOTED = re.compile(r"^'(?P<value>[^']*)'\s*,?\s*(?:#.*)?$")
_UNQUOTED = re.compile(r"^(?P<value>(?:\\.|[^#])*)(?:#.*)?$")


@dataclass(frozen=True)
class PendingHint:
    """A ``@type`` comment waiting for the next assignment line."""

    line: int
    expression: str


def parse_assignment(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(key, value)`` for an assignment line, ``None`` for anything else."""
    match = _ASSIGNMENT.match(line)
    if match is None:
        return None
    key = match.group("key")
    rest = match.group("rest").rstrip()

    for pattern in (_DOUBLE_QUOTED, _SINGLE_QUOTED):
        quoted = pattern.match(rest)
        if quoted is not None:
            return key, quoted.group("value")

    unquoted = _UNQUOTED.match(rest)
    if unquoted is None:
        return None
    value = unquoted.group("value").rstrip()
    if value.endswith(","):
        value = value[:-1].rstrip()
    return key, value


def parse_env_text(text: str, source_file: str) -> List[EnvVar]:
    """Parse dotenv text into variables, attaching the hint comment right above each."""
    variables: List[EnvVar] = []
    pending: List[PendingHint] = []

    for number, line in enumerate(text.lstrip("\ufeff").splitlines(), start=1):
        if not line.strip():
            pending.clear()
            continue

        comment = _COMMENT.match(line)
        if comment is not None:
            hint = _HINT.search(comment.group("body"))
            if hint is not None:
                pending.append(PendingHint(line=number, expression=hint.group("expression")))
            continue

        assignment = parse_assignment(line)
        if assignment is None:
            logger.debug("%s:%d: skipping unrecognised line", source_file, number)
            pending.clear()
            continue

        name, value = assignment
        variables.append(
            EnvVar(
                name=name,
                raw_value=value,
                source_file=source_file,
                source_line=number,
                hint=_resolve_pending(pending, source_file),
            )
        )
        pending.clear()

    return variables


def _resolve_pending(pending: List[PendingHint], source_file: str) -> Optional[TypeHint]:
    if not pending:
        return None
    latest = pending[-1]
    try:
        return parse_type_hint(latest.expression)
    except HintParseError as exc:
        logger.warning("%s:%d: %s; falling back to no hint", source_file, latest.line, exc)
        return None


__all__ = ["PendingHint", "parse_assignment", "parse_env_text"]
