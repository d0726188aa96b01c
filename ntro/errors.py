"""Error types raised by ntro pipelines."""

from __future__ import annotations

from pathlib import Path


class NtroError(RuntimeError):
    """Base class for every error ntro reports to the user."""


class SourceReadError(NtroError):
    """Raised when a source file is missing or cannot be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"failed to read {self.path}: {reason}")


class ParseError(NtroError):
    """Raised when a source document cannot be parsed."""

    def __init__(self, path: Path | str, message: str, *, line: int | None = None) -> None:
        self.path = Path(path)
        self.line = line
        self.message = message
        location = f"{self.path}:{line}" if line is not None else str(self.path)
        super().__init__(f"failed to parse {location}: {message}")


class HintParseError(NtroError):
    """Raised for a malformed ``@type`` expression."""

    def __init__(self, expression: str, message: str) -> None:
        self.expression = expression
        super().__init__(f"invalid type hint {expression!r}: {message}")


class OutputWriteError(NtroError):
    """Raised when a generated artifact cannot be written."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"failed to write {self.path}: {reason}")


class ConfigError(NtroError):
    """Raised when the configuration file cannot be parsed."""


class TsconfigError(NtroError):
    """Raised when tsconfig.json cannot be updated."""


class FormatError(NtroError):
    """Raised when prettier fails to format generated output."""


__all__ = [
    "ConfigError",
    "FormatError",
    "HintParseError",
    "NtroError",
    "OutputWriteError",
    "ParseError",
    "SourceReadError",
    "TsconfigError",
]
