"""YAML document pipeline: split, parse and render namespaced declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, cast

import yaml
from yaml.constructor import SafeConstructor

from .errors import ParseError
from .logging import get_logger
from .models import (
    BoolValue,
    Document,
    FloatValue,
    IntValue,
    MappingValue,
    NullValue,
    SequenceValue,
    StrValue,
    Value,
)
from .synth import synthesize

logger = get_logger("documents")

_SEPARATOR = re.compile(r"^---(?:[ \t]+(.*))?$")
_NAME_DELIMITERS = re.compile(r"[.\-_]+")
_TS_NUMBER = re.compile(
    r"^[+-]?(?:0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
    r"|(?:0|[1-9][0-9]*)(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?"
    r"|\.[0-9]+(?:[eE][+-]?[0-9]+)?)$"
)
_NON_FINITE = {".inf", "+.inf", "-.inf", ".nan"}

_NULL_TAG = "tag:yaml.org,2002:null"
_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_MERGE_TAG = "tag:yaml.org,2002:merge"


@dataclass(frozen=True)
class RawBlock:
    """Text of one document block and the 0-based source line it starts on."""

    index: int
    start_line: int
    text: str


def split_documents(raw_text: str) -> List[RawBlock]:
    """Split ``raw_text`` on ``---`` separator lines.

    An empty preamble before the first separator and an empty trailing block are
    dropped. Interior blocks keep their position even when they hold no content.
    """
    chunks: List[tuple[int, List[str]]] = []
    current: List[str] = []
    start = 0
    seen_separator = False

    for number, line in enumerate(raw_text.splitlines()):
        match = _SEPARATOR.match(line)
        if match is None:
            current.append(line)
            continue
        if seen_separator or _has_content(current):
            chunks.append((start, current))
        inline = match.group(1)
        current = [inline] if inline else []
        start = number if inline else number + 1
        seen_separator = True

    if not seen_separator or _has_content(current):
        chunks.append((start, current))

    return [
        RawBlock(index=index, start_line=line, text="\n".join(lines))
        for index, (line, lines) in enumerate(chunks)
    ]


def _has_content(lines: List[str]) -> bool:
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith(("#", "%")):
            return True
    return False


def parse_documents(source_path: Path | str, raw_text: str) -> List[Document]:
    """Parse every block of ``raw_text``; blocks holding nothing are skipped."""
    documents: List[Document] = []
    for block in split_documents(raw_text):
        value = _parse_block(source_path, block)
        if value is None:
            logger.debug("Skipping empty document %d in %s", block.index, source_path)
            continue
        documents.append(Document(value=value, index=block.index))
    return documents


def _parse_block(source_path: Path | str, block: RawBlock) -> Optional[Value]:
    # Directive lines are blanked rather than removed so parser marks keep their line numbers.
    text = "\n".join("" if line.startswith("%") else line for line in block.text.splitlines())
    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + block.start_line + 1 if mark is not None else None
        raise ParseError(source_path, _describe(exc), line=line) from exc
    if node is None:
        return None
    return _NodeConverter(source_path, block.start_line).convert(node)


def _describe(exc: yaml.YAMLError) -> str:
    problem = getattr(exc, "problem", None)
    context = getattr(exc, "context", None)
    if problem and context:
        return f"{context}, {problem}"
    if problem:
        return str(problem)
    return str(exc).splitlines()[0] if str(exc) else exc.__class__.__name__


class _NodeConverter:
    """Turns a composed PyYAML node graph into a value tree."""

    def __init__(self, source_path: Path | str, line_offset: int) -> None:
        self._path = source_path
        self._offset = line_offset
        self._constructor = SafeConstructor()
        self._active: Set[int] = set()

    def convert(self, node: yaml.Node) -> Value:
        if isinstance(node, yaml.ScalarNode):
            return self._scalar(node)
        if id(node) in self._active:
            raise ParseError(self._path, "recursive alias", line=self._line(node))
        self._active.add(id(node))
        try:
            if isinstance(node, yaml.SequenceNode):
                return SequenceValue(tuple(self.convert(item) for item in node.value))
            if isinstance(node, yaml.MappingNode):
                return self._mapping(node)
        finally:
            self._active.discard(id(node))
        raise ParseError(self._path, f"unsupported node {node.id}", line=self._line(node))

    def _scalar(self, node: yaml.ScalarNode) -> Value:
        if node.tag == _NULL_TAG:
            return NullValue()
        if node.tag == _BOOL_TAG:
            return BoolValue(self._constructor.construct_yaml_bool(node))
        if node.tag == _INT_TAG:
            return IntValue(self._numeric_text(node, self._constructor.construct_yaml_int))
        if node.tag == _FLOAT_TAG:
            return FloatValue(self._numeric_text(node, self._constructor.construct_yaml_float))
        return StrValue(node.value)

    def _numeric_text(self, node: yaml.ScalarNode, construct) -> str:
        text = node.value
        if text.lower() in _NON_FINITE or _TS_NUMBER.match(text):
            return text
        # YAML 1.1 spellings (1_000, 017, 1:30) have no TypeScript literal form.
        try:
            return str(construct(node))
        except (ValueError, yaml.YAMLError) as exc:
            raise ParseError(self._path, f"invalid number {text!r}", line=self._line(node)) from exc

    def _mapping(self, node: yaml.MappingNode) -> MappingValue:
        explicit: Set[str] = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            if not isinstance(key_node, yaml.ScalarNode):
                raise ParseError(
                    self._path, "mapping keys must be scalars", line=self._line(key_node)
                )
            if key_node.value in explicit:
                raise ParseError(
                    self._path, f"duplicate key {key_node.value!r}", line=self._line(key_node)
                )
            explicit.add(key_node.value)

        # Keys keep the position where they first appear, merged keys at their << entry.
        # Explicit keys win over merged ones and earlier merge sources win over later ones.
        pairs: Dict[str, Value] = {}
        for key_node, value_node in node.value:
            if key_node.tag != _MERGE_TAG:
                pairs[key_node.value] = self.convert(value_node)
                continue
            sources = value_node.value if isinstance(value_node, yaml.SequenceNode) else [value_node]
            for source in sources:
                if not isinstance(source, yaml.MappingNode):
                    raise ParseError(
                        self._path, "merge key expects a mapping", line=self._line(source)
                    )
                for key, value in cast(MappingValue, self.convert(source)).pairs:
                    if key not in explicit and key not in pairs:
                        pairs[key] = value
        return MappingValue(tuple(pairs.items()))

    def _line(self, node: yaml.Node) -> int:
        return node.start_mark.line + self._offset + 1


def namespace_name(source_path: Path | str) -> str:
    """PascalCase the file stem: ``test.multiple.yaml`` becomes ``TestMultiple``."""
    stem = Path(source_path).stem
    parts = []
    for part in _NAME_DELIMITERS.split(stem):
        cleaned = re.sub(r"[^A-Za-z0-9$]", "", part)
        if cleaned:
            parts.append(cleaned[0].upper() + cleaned[1:])
    name = "".join(parts) or "Config"
    if name[0].isdigit():
        name = f"_{name}"
    return name


def render_namespace(name: str, documents: List[Document]) -> str:
    lines = [f"declare namespace {name} {{"]
    for document in documents:
        lines.append(f"  export type Document{document.index} = {synthesize(document.value)};")
    members = ", ".join(f"Document{document.index}" for document in documents)
    lines.append(f"  export type All = [{members}];")
    lines.append("}")
    return "\n".join(lines) + "\n"


def process(source_path: Path | str, raw_text: str) -> str:
    """Return the namespace declaration for one YAML source."""
    documents = parse_documents(source_path, raw_text)
    logger.debug("Parsed %d document(s) from %s", len(documents), source_path)
    return render_namespace(namespace_name(source_path), documents)


__all__ = [
    "RawBlock",
    "namespace_name",
    "parse_documents",
    "process",
    "render_namespace",
    "split_documents",
]
