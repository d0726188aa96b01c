"""Fold dotenv variables from several files into one schema."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import (
    EnumType,
    EnvVar,
    MergedEnvVar,
    NumberType,
    Provenance,
    StringType,
    TypeHint,
)

logger = get_logger("dotenv.merge")

_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

SourceVariables = Tuple[str, Sequence[EnvVar]]


@dataclass
class _Sighting:
    """Mutable state for one variable while files are being folded."""

    name: str
    observed_values: List[str] = field(default_factory=list)
    hint: Optional[TypeHint] = None
    provenance: Optional[Provenance] = None
    file_count: int = 0
    last_file: int = -1

    def observe(self, variable: EnvVar, file_index: int) -> None:
        if variable.raw_value not in self.observed_values:
            self.observed_values.append(variable.raw_value)
        if file_index != self.last_file:
            self.file_count += 1
            self.last_file = file_index
        if variable.hint is None:
            return
        incoming = Provenance(variable.source_file, variable.source_line)
        if self.hint is None:
            self.hint = variable.hint
            self.provenance = incoming
        elif variable.hint != self.hint and self.provenance is not None:
            logger.warning(
                "Conflicting type hints for %s: keeping the one from %s:%d, ignoring %s:%d",
                self.name,
                self.provenance.source_file,
                self.provenance.source_line,
                incoming.source_file,
                incoming.source_line,
            )

    def finalize(self, total_file_count: int) -> MergedEnvVar:
        return MergedEnvVar(
            name=self.name,
            observed_values=tuple(self.observed_values),
            present_in_file_count=self.file_count,
            total_file_count=total_file_count,
            resolved_hint=self.hint,
            provenance=self.provenance,
        )


def merge(sources: Sequence[SourceVariables]) -> List[MergedEnvVar]:
    """Merge ``(file_path, variables)`` pairs in the order given.

    The first explicit hint for a name wins; the result is sorted by name.
    """
    sightings: Dict[str, _Sighting] = {}
    for file_index, (file_path, variables) in enumerate(sources):
        logger.debug("Merging %d variable(s) from %s", len(variables), file_path)
        for variable in variables:
            sighting = sightings.get(variable.name)
            if sighting is None:
                sighting = sightings[variable.name] = _Sighting(name=variable.name)
            sighting.observe(variable, file_index)

    total = len(sources)
    merged = [sightings[name].finalize(total) for name in sorted(sightings)]
    for variable in merged:
        if not variable.defined_everywhere:
            logger.debug(
                "%s is defined in %d of %d file(s)",
                variable.name,
                variable.present_in_file_count,
                total,
            )
    return merged


def is_decimal(text: str) -> bool:
    return bool(_DECIMAL.match(text))


def resolve_type(variable: MergedEnvVar) -> TypeHint:
    """Return the type used for ``variable`` in generated schemas.

    An explicit hint wins; otherwise several observed values form an enum, a single
    decimal value means a number, and everything else is a string.
    """
    if variable.resolved_hint is not None:
        return variable.resolved_hint
    if len(variable.observed_values) > 1:
        return EnumType(variable.observed_values)
    if variable.observed_values and is_decimal(variable.observed_values[0]):
        return NumberType()
    return StringType()


__all__ = ["SourceVariables", "is_decimal", "merge", "resolve_type"]
