"""Core data models shared across ntro components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

CLIENT_PREFIX = "NEXT_PUBLIC_"


# Value tree: one arm per shape a parsed YAML document can take.


@dataclass(frozen=True)
class NullValue:
    """YAML null."""


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class IntValue:
    """Integer scalar keeping its source text."""

    text: str


@dataclass(frozen=True)
class FloatValue:
    """Float scalar keeping its source text."""

    text: str


@dataclass(frozen=True)
class StrValue:
    value: str


@dataclass(frozen=True)
class SequenceValue:
    """Ordered list of values in source order."""

    items: Tuple["Value", ...] = ()


@dataclass(frozen=True)
class MappingValue:
    """Ordered key/value pairs in source order; keys are unique."""

    pairs: Tuple[Tuple[str, "Value"], ...] = ()


Value = Union[
    NullValue, BoolValue, IntValue, FloatValue, StrValue, SequenceValue, MappingValue
]


@dataclass(frozen=True)
class Document:
    """One parsed YAML document and its block position within the source."""

    value: Value
    index: int


# Type hints parsed from ``# @type`` comments.


@dataclass(frozen=True)
class StringType:
    pass


@dataclass(frozen=True)
class NumberType:
    pass


@dataclass(frozen=True)
class BooleanType:
    pass


@dataclass(frozen=True)
class EnumType:
    """Union of string literals, in declaration order without duplicates."""

    values: Tuple[str, ...]


@dataclass(frozen=True)
class RawExpression:
    """Hint text passed through verbatim."""

    text: str


TypeHint = Union[StringType, NumberType, BooleanType, EnumType, RawExpression]


@dataclass(frozen=True)
class EnvVar:
    """A single variable assignment observed in a dotenv file."""

    name: str
    raw_value: str
    source_file: str
    source_line: int
    hint: Optional[TypeHint] = None


@dataclass(frozen=True)
class Provenance:
    """File and 1-based line that supplied a resolved hint."""

    source_file: str
    source_line: int


@dataclass(frozen=True)
class MergedEnvVar:
    """A variable folded across every processed dotenv file."""

    name: str
    observed_values: Tuple[str, ...]
    present_in_file_count: int
    total_file_count: int
    resolved_hint: Optional[TypeHint] = None
    provenance: Optional[Provenance] = None
    is_client_exposed: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "is_client_exposed", self.name.startswith(CLIENT_PREFIX))

    @property
    def defined_everywhere(self) -> bool:
        return self.present_in_file_count >= self.total_file_count
