from pr_review_engine.infrastructure.tools.search.snippet_formatter import (
    format_file_matches,
    format_snippet,
    format_truncation,
    format_window_result,
)

LINES = ["one", "two", "three", "four", "five"]


class TestFormatSnippet:
    def test_marks_the_match_and_numbers_lines(self) -> None:
        assert format_snippet(LINES, 3, 1) == (
            "       2: two\n"
            ">>>    3: three\n"
            "       4: four"
        )

    def test_window_is_clamped_to_the_file(self) -> None:
        snippet = format_snippet(LINES, 1, 10)

        assert snippet.splitlines()[0] == ">>>    1: one"
        assert len(snippet.splitlines()) == 5


class TestFormatWindowResult:
    def test_no_matches(self) -> None:
        assert format_window_result("a.ts", "zzz", LINES, [], 2) == 'No matches found for "zzz" in a.ts'

    def test_single_match(self) -> None:
        result = format_window_result("a.ts", "two", LINES, [2], 0)

        assert result == 'Found 1 match for "two" in a.ts:\n\n>>>    2: two'

    def test_multiple_matches_are_numbered(self) -> None:
        result = format_window_result("a.ts", "o", LINES, [1, 2, 4], 0)

        assert result.startswith('Found 3 matches for "o" in a.ts:')
        assert "=== Match 3 (line 4) ===\n>>>    4: four" in result


class TestFormatFileMatches:
    def test_header_counts_matches(self) -> None:
        assert format_file_matches("a.ts", LINES, [5], 0).startswith("=== a.ts (1 match) ===\n")
        assert format_file_matches("a.ts", LINES, [1, 5], 0).startswith("=== a.ts (2 matches) ===\n")

    def test_blocks_are_labelled(self) -> None:
        result = format_file_matches("a.ts", LINES, [1, 5], 0)

        assert "--- Match 1 (line 1) ---\n>>>    1: one" in result
        assert "--- Match 2 (line 5) ---\n>>>    5: five" in result

    def test_truncation_notice(self) -> None:
        assert format_truncation(50) == "\n[Truncated after 50 matches]"
