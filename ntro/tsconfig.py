"""Register the generated env module as a tsconfig path alias."""

from __future__ import annotations

import json
import os
from pathlib import Path

from .errors import TsconfigError
from .logging import get_logger

logger = get_logger("tsconfig")

DEFAULT_ALIAS = "$env"


def alias_target(tsconfig_path: Path, module_path: Path) -> str:
    """Return ``module_path`` relative to the tsconfig directory, without ``.ts``."""
    relative = Path(os.path.relpath(module_path.resolve(), tsconfig_path.resolve().parent))
    if relative.suffix == ".ts":
        relative = relative.with_suffix("")
    text = relative.as_posix()
    return text if text.startswith(".") else f"./{text}"


def add_path_alias(tsconfig_path: Path, module_path: Path, *, alias: str = DEFAULT_ALIAS) -> bool:
    """Point ``compilerOptions.paths[alias]`` at ``module_path``.

    Returns True when tsconfig.json was rewritten.
    """
    try:
        original = tsconfig_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TsconfigError(f"couldn't open {tsconfig_path}: {exc}") from exc
    try:
        data = json.loads(original)
    except json.JSONDecodeError as exc:
        raise TsconfigError(
            f"failed to parse {tsconfig_path}:{exc.lineno}: {exc.msg}"
        ) from exc
    if not isinstance(data, dict):
        raise TsconfigError(f"{tsconfig_path} must contain a JSON object")

    options = data.setdefault("compilerOptions", {})
    if not isinstance(options, dict):
        raise TsconfigError(f"compilerOptions in {tsconfig_path} must be an object")
    paths = options.setdefault("paths", {})
    if not isinstance(paths, dict):
        raise TsconfigError(f"compilerOptions.paths in {tsconfig_path} must be an object")

    target = [alias_target(tsconfig_path, module_path)]
    if paths.get(alias) == target:
        logger.debug("%s already maps %s to %s", tsconfig_path, alias, target[0])
        return False
    paths[alias] = target

    try:
        tsconfig_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise TsconfigError(f"failed to update {tsconfig_path}: {exc}") from exc
    logger.info("Registered %s -> %s in %s", alias, target[0], tsconfig_path)
    return True


__all__ = ["DEFAULT_ALIAS", "add_path_alias", "alias_target"]
