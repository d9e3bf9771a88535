"""Tests for the scan state machine.

Covers anchoring, greedy non-backtracking placeholders, gap whitespace
rules, abandonment, termination and the progress guard.
"""

import time

import pytest

from splicer import Engine, MatchHandle, ScanConfig, Scanner, TextBuffer, compile

BATCH = "@echo off\r\n\r\nfn main()\r\n{-\r\n\t; A=B\r\n-}\r\n"
SET_PATTERN = compile(";[name]=[value]\n")


def collect(text: str, pattern: str, **kwargs: object) -> list[MatchHandle]:
    """Run a read-only scan and return the handles seen by the callback."""
    seen: list[MatchHandle] = []
    Engine(text).apply(pattern, seen.append, **kwargs)  # type: ignore[arg-type]
    return seen


# =========================================================================
# End-to-end rewriting
# =========================================================================


class TestBatchRewrite:
    """Rewrite `; name=value` lines into SET statements."""

    def test_value_keeps_carriage_return(self) -> None:
        """The value runs up to the LF delimiter, so a CR before it is captured."""
        engine = Engine(BATCH)

        def to_set(m: MatchHandle) -> None:
            name = m.get_value("name").strip()
            value = m.get_value("value")
            m.replace(f"SET {name}={value}\n")

        assert engine.apply(SET_PATTERN, to_set, label="test card") == 1
        assert engine.text == "@echo off\r\n\r\nfn main()\r\n{-\r\n\tSET A=B\r\n-}\r\n"

    def test_trimmed_value(self) -> None:
        engine = Engine(BATCH)

        def to_set(m: MatchHandle) -> None:
            name = m.get_value("name").strip()
            value = m.get_value("value").strip()
            m.replace(f"SET {name}={value}\n")

        engine.apply(SET_PATTERN, to_set)
        assert engine.text == "@echo off\r\n\r\nfn main()\r\n{-\r\n\tSET A=B\n-}\r\n"

    def test_captured_values(self) -> None:
        (m,) = collect(BATCH, ";[name]=[value]\n")
        assert m.get_value("name") == " A"
        assert m.get_value("value") == "B\r"
        assert m.text == "; A=B\r\n"
        assert BATCH[m.start : m.end] == m.text

    def test_read_only_scan_leaves_text_unchanged(self) -> None:
        engine = Engine(BATCH)
        engine.apply(SET_PATTERN, lambda m: None)
        assert engine.text == BATCH


# =========================================================================
# Successive occurrences
# =========================================================================


class TestOccurrences:
    """Left-to-right discovery of every occurrence."""

    def test_two_occurrences_in_order(self) -> None:
        found = collect("x <a> y <b> z", "<[v]>")
        assert [m.get_value("v") for m in found] == ["a", "b"]
        assert [(m.start, m.end) for m in found] == [(2, 5), (8, 11)]

    def test_edit_shifts_following_match(self) -> None:
        engine = Engine("k=1;k=2;")
        seen: list[str] = []

        def expand(m: MatchHandle) -> None:
            seen.append(m.text)
            m.replace(f"key={m.get_value('v')};")

        assert engine.apply("k=[v];", expand) == 2
        assert seen == ["k=1;", "k=2;"]
        assert engine.text == "key=1;key=2;"

    def test_replacement_text_not_rescanned(self) -> None:
        engine = Engine("a-a")
        calls = engine.apply("a", lambda m: m.replace("aa"), case_sensitive=True)
        assert calls == 2
        assert engine.text == "aa-aa"

    def test_shrinking_edits(self) -> None:
        engine = Engine("(one) (two) (three)")
        engine.apply("([w])", lambda m: m.replace(m.get_value("w")[0]))
        assert engine.text == "o t t"

    def test_zero_matches_is_no_op(self) -> None:
        calls: list[MatchHandle] = []
        engine = Engine("nothing here")
        assert engine.apply("<[x]>", calls.append) == 0
        assert calls == []
        assert engine.text == "nothing here"

    def test_empty_pattern_is_no_op(self) -> None:
        assert collect("abc", "") == []


# =========================================================================
# Token matching
# =========================================================================


class TestPlaceholders:
    """Capture and Gap spans."""

    def test_capture_is_greedy_to_next_delimiter(self) -> None:
        found = collect("a1b a2 a3b", "a[x]b", case_sensitive=True)
        assert [m.get_value("x") for m in found] == ["1", "2 a3"]

    def test_trailing_capture_runs_to_end(self) -> None:
        (m,) = collect("key: rest of line\nmore", "key:[rest]")
        assert m.get_value("rest") == " rest of line\nmore"

    def test_gap_accepts_whitespace(self) -> None:
        found = collect("if(x) if \t\r\n (y)", "if*([c])")
        assert [m.get_value("c") for m in found] == ["x", "y"]

    def test_gap_rejects_other_characters(self) -> None:
        found = collect("if x(  if  (", "if*(")
        assert [(m.start, m.end) for m in found] == [(7, 12)]
        assert found[0].text == "if  ("

    def test_gap_only_candidate_never_reported(self) -> None:
        assert collect("if x(", "if*(") == []

    def test_capture_index_is_absolute(self) -> None:
        (m,) = collect("...<abc>", "<[v]>")
        capture = m.get_capture("v")
        assert capture is not None
        assert capture.index == 4
        assert m.match.offset_of(capture) == 1

    def test_adjacent_placeholders_first_is_empty(self) -> None:
        (m,) = collect("a12b", "a[x][y]b")
        assert m.get_value("x") == ""
        assert m.get_value("y") == "12"

    def test_gap_before_capture_is_empty(self) -> None:
        (m,) = collect("< v>", "<*[y]>")
        assert m.get_value("y") == " v"


class TestCaseSensitivity:
    """Literal matching with and without letter case."""

    def test_insensitive_by_default(self) -> None:
        (m,) = collect("SET Path=/bin", "set [k]=[v]")
        assert m.get_value("k") == "Path"
        assert m.get_value("v") == "/bin"

    def test_sensitive(self) -> None:
        assert collect("SET Path=/bin", "set [k]=[v]", case_sensitive=True) == []

    def test_insensitive_delimiters(self) -> None:
        (m,) = collect("<A>x</a>", "<a>[body]</A>")
        assert m.get_value("body") == "x"

    def test_insensitive_reanchor(self) -> None:
        found = collect("Item 1; ITEM 2;", "item [n];")
        assert [m.get_value("n") for m in found] == ["1", "2"]


# =========================================================================
# Termination
# =========================================================================


class TestTermination:
    """Scans stop deterministically."""

    def test_missing_literal_ends_scan(self) -> None:
        found = collect("<a> <b", "<[x]>")
        assert [m.get_value("x") for m in found] == ["a"]

    def test_missing_delimiter_then_missing_anchor(self) -> None:
        assert collect("ab ab", "ab[x]c") == []

    def test_capture_first_without_delimiter(self) -> None:
        assert collect("no delimiter here", "[x];") == []

    def test_capture_first_partial_tail(self) -> None:
        found = collect("x=1;y=2", "[k]=[v];")
        assert [(m.get_value("k"), m.get_value("v")) for m in found] == [("x", "1")]

    def test_gap_first_steps_past_non_whitespace(self) -> None:
        found = collect("a; ;b;", "*;")
        assert [m.text for m in found] == [";", " ;", ";"]
        assert [m.start for m in found] == [1, 2, 5]

    def test_lone_capture_takes_everything_once(self) -> None:
        found = collect("abc", "[all]")
        assert [m.get_value("all") for m in found] == ["abc"]

    def test_lone_capture_on_empty_text(self) -> None:
        found = collect("", "[all]")
        assert len(found) == 1
        assert found[0].get_value("all") == ""

    def test_lone_gap_on_text_without_whitespace(self) -> None:
        found = collect("abc", "*")
        assert [m.text for m in found] == [""]
        assert found[0].start == 3

    def test_zero_width_insert_is_not_rescanned(self) -> None:
        engine = Engine("")
        assert engine.apply("[all]", lambda m: m.replace("abc")) == 1
        assert engine.text == "abc"

    def test_higher_stall_limit_still_terminates(self) -> None:
        buffer = TextBuffer("no delimiter")
        scanner = Scanner(
            buffer,
            compile("[x];"),
            lambda m: None,
            ScanConfig(max_stalled_attempts=3),
        )
        assert scanner.run() == 0

    @pytest.mark.parametrize("case_sensitive", [False, True])
    def test_missing_delimiter_ends_scan_on_long_text(self, case_sensitive: bool) -> None:
        engine = Engine("x" * 200_000)
        began = time.perf_counter()
        assert engine.apply("[v];", lambda m: None, case_sensitive=case_sensitive) == 0
        assert time.perf_counter() - began < 2.0
        assert engine.buffer.cursor == 0

    def test_missing_delimiter_keeps_earlier_matches(self) -> None:
        found = collect("a;b;" + "c" * 50_000, "[v];")
        assert [m.get_value("v") for m in found] == ["a", "b"]


class TestCursorLifecycle:
    """The cursor is idle (zero) outside of scans."""

    def test_reset_after_scan(self) -> None:
        engine = Engine("<a> <b>")
        engine.apply("<[x]>", lambda m: None)
        assert engine.buffer.cursor == 0

    def test_cursor_during_callback_is_match_end(self) -> None:
        engine = Engine("xx <a> <b>")
        cursors: list[int] = []
        engine.apply("<[x]>", lambda m: cursors.append(engine.buffer.cursor))
        assert cursors == [6, 10]

    def test_reset_when_callback_raises(self) -> None:
        engine = Engine("a;b;")

        def upper_then_fail(m: MatchHandle) -> None:
            m.replace(m.text.upper())
            if m.get_value("x") == "b":
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            engine.apply("[x];", upper_then_fail)
        assert engine.text == "A;b;"
        assert engine.buffer.cursor == 0
        assert engine.apply("[x];", lambda m: None) == 2
