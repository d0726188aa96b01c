"""Tests for the YAML document pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from ntro.documents import (
    namespace_name,
    parse_documents,
    process,
    render_namespace,
    split_documents,
)
from ntro.errors import ParseError
from ntro.models import BoolValue, Document, IntValue, MappingValue, StrValue


def test_process_single_document_fixture(fixtures_dir: Path) -> None:
    source = fixtures_dir / "test.yaml"

    output = process(source, source.read_text(encoding="utf-8"))

    assert output == (
        "declare namespace Test {\n"
        '  export type Document0 = { doe: "a deer, a female deer"; ray: "a drop of golden sun"; '
        'pi: 3.14159; xmas: true; "french-hens": 3; '
        '"calling-birds": ["huey", "dewey", "louie", "fred"]; '
        '"xmas-fifth-day": { "calling-birds": "four"; "french-hens": 3; "golden-rings": 5; '
        'partridges: { count: 1; location: "a pear tree" }; "turtle-doves": "two" } };\n'
        "  export type All = [Document0];\n"
        "}\n"
    )


def test_process_multiple_documents_fixture(fixtures_dir: Path) -> None:
    source = fixtures_dir / "test.multiple.yaml"

    output = process(source, source.read_text(encoding="utf-8"))

    assert output == (
        "declare namespace TestMultiple {\n"
        '  export type Document0 = { name: "first"; version: 1 };\n'
        '  export type Document1 = { name: "second"; enabled: false; items: [1, 2.5, null] };\n'
        '  export type Document2 = { name: "third"; "quoted key": "value" };\n'
        "  export type All = [Document0, Document1, Document2];\n"
        "}\n"
    )


def test_split_documents_without_separator_is_one_block() -> None:
    blocks = split_documents("a: 1\nb: 2\n")

    assert len(blocks) == 1
    assert blocks[0].index == 0
    assert blocks[0].start_line == 0
    assert blocks[0].text == "a: 1\nb: 2"


def test_split_documents_drops_empty_preamble_and_trailer() -> None:
    blocks = split_documents("# header\n---\na: 1\n---\n")

    assert [(block.index, block.start_line, block.text) for block in blocks] == [(0, 2, "a: 1")]


def test_split_documents_keeps_interior_empty_blocks() -> None:
    blocks = split_documents("---\na: 1\n---\n---\nb: 2\n")

    assert [block.index for block in blocks] == [0, 1, 2]
    assert blocks[1].text == ""
    assert blocks[2].start_line == 4


def test_split_documents_content_after_separator() -> None:
    blocks = split_documents("--- plain text\n")

    assert len(blocks) == 1
    assert blocks[0].start_line == 0
    assert blocks[0].text == "plain text"


def test_parse_documents_skips_empty_blocks_but_keeps_indices() -> None:
    documents = parse_documents("gaps.yaml", "---\na: 1\n---\n# nothing here\n---\nb: 2\n")

    assert [document.index for document in documents] == [0, 2]
    assert documents[1].value == MappingValue((("b", IntValue("2")),))


def test_parse_documents_ignores_directives() -> None:
    documents = parse_documents("directive.yaml", "%YAML 1.1\n---\nflag: yes\n")

    assert documents == [Document(value=MappingValue((("flag", BoolValue(True)),)), index=0)]


def test_parse_documents_keeps_numeric_source_text() -> None:
    documents = parse_documents("numbers.yaml", "hex: 0x1F\nforced: !!str 12\n")

    assert documents[0].value == MappingValue(
        (("hex", IntValue("0x1F")), ("forced", StrValue("12")))
    )
    assert process("numbers.yaml", "hex: 0x1F\nforced: !!str 12\n").splitlines()[1] == (
        '  export type Document0 = { hex: 0x1F; forced: "12" };'
    )


def test_parse_documents_normalises_yaml11_number_spellings() -> None:
    output = process("legacy.yaml", "big: 1_000\noctal: 017\nclock: 1:30\n")

    assert "{ big: 1000; octal: 15; clock: 90 }" in output


def test_merge_keys_do_not_leak_into_anchor() -> None:
    text = "base: &base\n  x: 1\n  y: 2\nchild:\n  <<: *base\n  y: 3\n"

    output = process("merge.yaml", text)

    assert "{ base: { x: 1; y: 2 }; child: { x: 1; y: 3 } }" in output


def test_duplicate_key_reports_source_line() -> None:
    text = "---\nname: x\n---\nname: a\nname: b\n"

    with pytest.raises(ParseError) as excinfo:
        parse_documents("dupes.yaml", text)

    assert excinfo.value.line == 5
    assert "duplicate key 'name'" in str(excinfo.value)
    assert excinfo.value.path == Path("dupes.yaml")


def test_syntax_error_reports_line_in_later_block() -> None:
    text = "a: 1\n---\nok: 1\n  bad: 2\n"

    with pytest.raises(ParseError) as excinfo:
        parse_documents("broken.yaml", text)

    assert excinfo.value.line == 4
    assert str(excinfo.value).startswith("failed to parse broken.yaml:4:")


def test_recursive_alias_is_rejected() -> None:
    with pytest.raises(ParseError, match="recursive alias"):
        parse_documents("loop.yaml", "a: &a\n  - *a\n")


def test_empty_source_renders_empty_tuple() -> None:
    assert process("empty.yaml", "") == "declare namespace Empty {\n  export type All = [];\n}\n"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("test.yaml", "Test"),
        ("config/test.multiple.yaml", "TestMultiple"),
        ("app-config_v2.yml", "AppConfigV2"),
        ("2fa.yaml", "_2fa"),
    ],
)
def test_namespace_name(path: str, expected: str) -> None:
    assert namespace_name(path) == expected


def test_render_namespace_lists_documents_in_order() -> None:
    documents = [
        Document(value=StrValue("a"), index=0),
        Document(value=StrValue("b"), index=3),
    ]

    assert render_namespace("Gaps", documents) == (
        "declare namespace Gaps {\n"
        '  export type Document0 = "a";\n'
        '  export type Document3 = "b";\n'
        "  export type All = [Document0, Document3];\n"
        "}\n"
    )


def test_key_with_trailing_newline_is_quoted() -> None:
    output = process("newline.yaml", '"abc\\n": 1\n')

    assert output.splitlines()[1] == '  export type Document0 = { "abc\\n": 1 };'


def test_merged_keys_take_the_position_of_the_merge_entry() -> None:
    text = "base: &base\n  x: 1\n  a: 9\nchild:\n  a: 2\n  <<: *base\n  z: 3\n"

    output = process("merge_order.yaml", text)

    assert "child: { a: 2; x: 1; z: 3 }" in output


def test_earlier_merge_source_wins() -> None:
    text = (
        "one: &one\n  k: 1\n"
        "two: &two\n  k: 2\n  extra: true\n"
        "both:\n  <<: [*one, *two]\n"
    )

    output = process("merge_sources.yaml", text)

    assert "both: { k: 1; extra: true }" in output
