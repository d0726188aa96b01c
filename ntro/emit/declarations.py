"""Ambient ``NodeJS.ProcessEnv`` declaration output."""

from __future__ import annotations

from typing import Iterable

from ..models import MergedEnvVar


def render_process_env(variables: Iterable[MergedEnvVar]) -> str:
    """Render the ``env.d.ts`` body.

    Client-exposed ``NEXT_PUBLIC_`` variables are required, every other variable
    is optional.
    """
    members = []
    for variable in sorted(variables, key=lambda item: item.name):
        marker = "" if variable.is_client_exposed else "?"
        members.append(f"    {variable.name}{marker}: string;")

    lines = ["declare namespace NodeJS {", "  interface ProcessEnv {"]
    if members:
        lines.append("\n\n".join(members))
    lines.extend(["  }", "}"])
    return "\n".join(lines) + "\n"


__all__ = ["render_process_env"]
