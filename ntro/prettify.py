"""Prettier integration for generated TypeScript."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import FormatError
from .logging import get_logger

logger = get_logger("prettify")

_EXECUTORS = {
    "pnpm": "pnpx",
    "yarn": "yarn",
    "npm": "npx",
}


def detect_package_manager(project_dir: Path) -> str:
    """Infer the Node package manager from lockfiles in ``project_dir``."""
    if (project_dir / "pnpm-lock.yaml").is_file():
        return "pnpm"
    if (project_dir / "yarn.lock").is_file():
        return "yarn"
    return "npm"


class Prettier:
    """Formats text by piping it through prettierd or prettier."""

    def __init__(
        self,
        project_dir: Path | None = None,
        *,
        runner: Callable[..., subprocess.CompletedProcess] | None = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.project_dir = project_dir or Path.cwd()
        self._runner = runner or subprocess.run
        self._which = which

    def command(self, file_name: str) -> List[str]:
        if self._which("prettierd"):
            return ["prettierd", file_name]
        executor = _EXECUTORS[detect_package_manager(self.project_dir)]
        if not self._which(executor):
            raise FormatError(
                f"neither prettierd nor {executor} was found on PATH to run prettier"
            )
        return [executor, "prettier", "--stdin-filepath", file_name]

    def format(self, text: str, file_name: str) -> str:
        """Return ``text`` formatted as if it lived in ``file_name``."""
        command = self.command(file_name)
        logger.debug("Running %s", " ".join(command))
        try:
            result = self._run(command, text)
        except OSError as exc:
            raise FormatError(f"failed to spawn {' '.join(command)}: {exc}") from exc
        if result.returncode != 0:
            details = (result.stderr or result.stdout or "").strip()
            raise FormatError(f"prettier exited with status {result.returncode}: {details}")
        return result.stdout

    def _run(self, command: Sequence[str], text: str) -> subprocess.CompletedProcess:
        return self._runner(
            list(command),
            input=text,
            capture_output=True,
            text=True,
            cwd=self.project_dir,
            check=False,
        )


__all__ = ["Prettier", "detect_package_manager"]
