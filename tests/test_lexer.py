"""Tests for the line scanner — comments, strings, raw strings, structural events."""

from rsloc.scanner.lexer import (
    EventKind,
    LexMode,
    ScanEvent,
    Scanner,
    scan_lines,
    split_lines,
)
from rsloc.stats.models import LineType

CODE = LineType.CODE
DOC = LineType.DOC
COMMENT = LineType.COMMENT
BLANK = LineType.BLANK


def tags(text: str):
    return [line.tag for line in scan_lines(text)]


def events(text: str):
    return [line.events for line in scan_lines(text)]


class TestSplitLines:
    def test_empty_content_has_no_lines(self):
        assert split_lines("") == []

    def test_trailing_newline(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_final_line_without_newline_counts(self):
        assert split_lines("a\nb") == ["a", "b"]

    def test_crlf(self):
        assert split_lines("a\r\nb\r\n") == ["a", "b"]

    def test_lone_cr_is_not_a_line_break(self):
        assert split_lines("a\rb\n") == ["a\rb"]

    def test_bom_dropped(self):
        assert split_lines("\ufefffn main() {}\n") == ["fn main() {}"]

    def test_blank_lines_kept(self):
        assert split_lines("\n\n") == ["", ""]


class TestLineTags:
    def test_single_code_line(self):
        assert tags("fn main() {}\n") == [CODE]

    def test_nested_block_comment_on_one_line(self):
        assert tags("/* a /* b */ c */\n") == [COMMENT]

    def test_raw_string_content_is_inert(self):
        assert tags('let s = r#"// not a comment"#;\n') == [CODE]

    def test_line_comment_kinds(self):
        text = "// plain\n/// outer doc\n//! inner doc\n//// banner\n"
        assert tags(text) == [COMMENT, DOC, DOC, COMMENT]

    def test_whitespace_only_line_is_blank(self):
        assert tags("   \t\nfn f() {}\n") == [BLANK, CODE]

    def test_code_beats_trailing_comment(self):
        assert tags("let x = 1; // one\n/* c */ let y = 2;\n") == [CODE, CODE]

    def test_code_beats_doc(self):
        assert tags("fn f() {} /** trailing */\n") == [CODE]

    def test_empty_block_comment_is_not_doc(self):
        assert tags("/**/\nfn f() {}\n") == [COMMENT, CODE]

    def test_triple_star_is_not_doc(self):
        assert tags("/*** banner ***/\n") == [COMMENT]

    def test_doc_block_spans_lines(self):
        text = "/** Docs\n   more docs\n\n*/\nfn f() {}\n"
        assert tags(text) == [DOC, DOC, BLANK, DOC, CODE]

    def test_inner_doc_block(self):
        assert tags("/*!\n crate docs\n*/\n") == [DOC, DOC, DOC]

    def test_nested_comment_spans_lines(self):
        text = "/* outer\n/* inner */\nstill comment\n*/\nfn f() {}\n"
        assert tags(text) == [COMMENT, COMMENT, COMMENT, COMMENT, CODE]

    def test_comment_close_then_code(self):
        assert tags("/* a\n*/ fn f() {}\n") == [COMMENT, CODE]


class TestStrings:
    def test_multiline_string(self):
        text = 'let s = "line one\n// not a comment\n\nend";\n// real\n'
        assert tags(text) == [CODE, CODE, BLANK, CODE, COMMENT]

    def test_escaped_quote(self):
        text = 'let s = "a \\" // b";\n// real\n'
        assert tags(text) == [CODE, COMMENT]

    def test_raw_string_closes_only_on_matching_hashes(self):
        text = 'let s = r##"a "# b"##;\n// after\n'
        assert tags(text) == [CODE, COMMENT]

    def test_multiline_raw_string(self):
        text = 'let s = r"\n*/ {\n";\n/* c */\n'
        assert tags(text) == [CODE, CODE, CODE, COMMENT]
        assert events(text)[1] == ()

    def test_byte_raw_string(self):
        assert events('let b = br#"{"#;\n') == [(ScanEvent(EventKind.ITEM_END, 0),)]

    def test_identifier_ending_in_r_is_not_raw(self):
        text = 'let bar = "x";\n// c\n'
        assert tags(text) == [CODE, COMMENT]

    def test_raw_identifier_is_code(self):
        assert tags("let r#type = 1;\n") == [CODE]

    def test_char_literals_are_inert(self):
        text = "let c = '{';\nlet q = '\"';\nlet e = '\\'';\n// c\n"
        assert tags(text) == [CODE, CODE, CODE, COMMENT]
        assert all(
            event.kind is EventKind.ITEM_END for line in events(text) for event in line
        )

    def test_lifetimes_pass_through(self):
        assert events("fn f<'a>(x: &'a str) {}\n") == [
            (ScanEvent(EventKind.BLOCK_OPEN, 0), ScanEvent(EventKind.BLOCK_CLOSE, 0)),
        ]

    def test_unterminated_constructs_are_not_errors(self):
        assert tags('let s = "open\n') == [CODE]
        assert tags("/* never closed\nfn f() {}\n") == [COMMENT, COMMENT]


class TestEvents:
    def test_brace_depths(self):
        text = "mod m {\n    fn f() {}\n}\n"
        assert events(text) == [
            (ScanEvent(EventKind.BLOCK_OPEN, 0),),
            (ScanEvent(EventKind.BLOCK_OPEN, 1), ScanEvent(EventKind.BLOCK_CLOSE, 1)),
            (ScanEvent(EventKind.BLOCK_CLOSE, 0),),
        ]

    def test_unbalanced_close_clamps_at_zero(self):
        assert events("}\n}\n") == [
            (ScanEvent(EventKind.BLOCK_CLOSE, 0),),
            (ScanEvent(EventKind.BLOCK_CLOSE, 0),),
        ]

    def test_test_attributes(self):
        assert events("#[test]\n") == [(ScanEvent(EventKind.TEST_ATTR, 0),)]
        assert events("#[cfg(test)]\n") == [(ScanEvent(EventKind.TEST_ATTR, 0),)]

    def test_attribute_whitespace_tolerated(self):
        assert events("# [ cfg ( test ) ]\n") == [(ScanEvent(EventKind.TEST_ATTR, 0),)]

    def test_other_attributes_ignored(self):
        assert events("#[cfg(not(test))]\n#[derive(Debug)]\n") == [(), ()]

    def test_attributes_in_strings_and_comments_ignored(self):
        text = 'let s = "#[test]";\n// #[test]\n/* #[cfg(test)] */\n'
        assert events(text) == [(ScanEvent(EventKind.ITEM_END, 0),), (), ()]

    def test_semicolons_inside_brackets_are_not_item_ends(self):
        assert events("let a: [u8; 4] = [0; 4];\n") == [(ScanEvent(EventKind.ITEM_END, 0),)]

    def test_braces_in_comments_ignored(self):
        assert events("// {\n/* } */\n") == [(), ()]


class TestScannerState:
    def test_state_carries_between_lines(self):
        scanner = Scanner()
        scanner.scan_line(1, "/* open")
        assert scanner.state.mode is LexMode.BLOCK_COMMENT
        assert scanner.state.comment_depth == 1
        scanner.scan_line(2, "*/")
        assert scanner.state.mode is LexMode.NORMAL

    def test_line_comment_ends_with_line(self):
        scanner = Scanner()
        scanner.scan_line(1, "// c")
        assert scanner.state.mode is LexMode.NORMAL

    def test_string_mode_property(self):
        scanner = Scanner()
        scanner.scan_line(1, 'let s = r#"open')
        assert scanner.state.string_mode is LexMode.RAW_STRING
        assert scanner.state.raw_delimiter_len == 1

    def test_scans_are_independent(self):
        assert tags("/* unterminated\n") == [COMMENT]
        assert tags("fn f() {}\n") == [CODE]

    def test_line_numbers(self):
        assert [line.line_no for line in scan_lines("a\nb\nc")] == [1, 2, 3]
