"""Pipeline orchestration for yaml and dotenv generation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from . import documents
from .dotenv import merge, parse_env_text
from .emit import render_process_env, render_zod_module
from .errors import FormatError, NtroError, OutputWriteError, ParseError, SourceReadError
from .logging import get_logger
from .models import EnvVar, MergedEnvVar
from .prettify import Prettier
from .tsconfig import add_path_alias


@dataclass
class YamlOutcome:
    """Result of a yaml generation run."""

    written: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    failures: List[NtroError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class DotenvOutcome:
    """Result of a dotenv generation run."""

    variables: List[MergedEnvVar] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    failures: List[NtroError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def read_source(path: Path) -> str:
    """Read ``path`` completely as UTF-8."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        raise SourceReadError(path, reason) from exc


def declaration_filename(source: Path) -> str:
    """``config/test.multiple.yaml`` is written as ``test.multiple.d.ts``."""
    return source.with_suffix(".d.ts").name


class Orchestrator:
    """Coordinates reading sources, generating TypeScript and writing outputs."""

    def __init__(self, *, prettier: Prettier | None = None, prettify: bool = False) -> None:
        self.prettify = prettify
        self.prettier = prettier
        self.logger = get_logger("orchestrator")

    def run_yaml(self, sources: Sequence[Path], output_dir: Path) -> YamlOutcome:
        """Generate one ``.d.ts`` namespace declaration per YAML source."""
        outcome = YamlOutcome()
        self.logger.debug("Starting yaml run for %d source(s)", len(sources))
        for source in sources:
            try:
                declaration = documents.process(source, read_source(source))
            except (SourceReadError, ParseError) as exc:
                self.logger.error("%s", exc)
                outcome.failures.append(exc)
                continue
            target = output_dir / declaration_filename(source)
            self._record(outcome, target, self._write_output(target, declaration))
        return outcome

    def run_dotenv(
        self,
        sources: Sequence[Path],
        output_dir: Path,
        *,
        zod: bool = False,
        tsconfig: Path | None = None,
        declaration_file: str = "env.d.ts",
        module_file: str = "env.parsed.ts",
    ) -> DotenvOutcome:
        """Merge every dotenv source into ``env.d.ts`` and optionally the zod module.

        Unreadable sources are reported and skipped; the remaining files are still
        merged. ``tsconfig`` registers the zod module as the ``$env`` path alias.
        """
        outcome = DotenvOutcome()
        parsed: List[Tuple[str, List[EnvVar]]] = []
        for source in sources:
            try:
                text = read_source(source)
            except SourceReadError as exc:
                self.logger.error("%s", exc)
                outcome.failures.append(exc)
                continue
            variables = parse_env_text(text, str(source))
            self.logger.debug("Parsed %d variable(s) from %s", len(variables), source)
            parsed.append((str(source), variables))

        if not parsed:
            self.logger.warning("No readable dotenv sources; nothing was generated")
            return outcome

        outcome.variables = merge(parsed)
        declaration_path = output_dir / declaration_file
        self._record(
            outcome,
            declaration_path,
            self._write_output(declaration_path, render_process_env(outcome.variables)),
        )

        if zod:
            module_path = output_dir / module_file
            self._record(
                outcome,
                module_path,
                self._write_output(module_path, render_zod_module(outcome.variables)),
            )
            if tsconfig is not None:
                add_path_alias(tsconfig, module_path)
        return outcome

    def _record(self, outcome: YamlOutcome | DotenvOutcome, path: Path, changed: bool) -> None:
        if changed:
            outcome.written.append(path)
            self.logger.info("Wrote %s", path)
        else:
            outcome.unchanged.append(path)
            self.logger.debug("%s is up to date", path)

    def _write_output(self, path: Path, text: str) -> bool:
        """Write ``text`` unless ``path`` already holds it; return True on change."""
        text = self._format(text, path.name)
        try:
            if path.is_file() and path.read_text(encoding="utf-8") == text:
                return False
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise OutputWriteError(path, str(exc)) from exc
        return True

    def _format(self, text: str, file_name: str) -> str:
        if not self.prettify:
            return text
        prettier = self._resolve_prettier()
        try:
            return prettier.format(text, file_name)
        except FormatError as exc:
            self.logger.warning("Writing %s unformatted: %s", file_name, exc)
            return text

    def _resolve_prettier(self) -> Prettier:
        if self.prettier is None:
            self.prettier = Prettier()
        return self.prettier


__all__ = [
    "DotenvOutcome",
    "Orchestrator",
    "YamlOutcome",
    "declaration_filename",
    "read_source",
]
