from glyphscope_analyzer import ExecGuard, build_line_map, execute


def test_single_match_without_global():
    result = execute("cat", "", "the cat sat")
    assert [m.span for m in result.matches] == [(4, 7)]
    match = result.matches[0]
    assert match.text == "cat"
    assert match.match_index == 0
    assert (match.line.number, match.line.column_start, match.line.column_end) == (1, 5, 8)
    assert result.error is None


def test_first_match_only_without_global():
    assert len(execute("a", "", "aaa").matches) == 1


def test_global_finds_every_match():
    assert [m.span for m in execute("a", "g", "aaa").matches] == [(0, 1), (1, 2), (2, 3)]


def test_many_matches_without_global_when_allowed():
    guard = ExecGuard(require_global_for_many=False)
    assert len(execute("a", "", "aaa", guard).matches) == 3


def test_zero_width_matches_advance():
    result = execute("x*", "g", "ab")
    assert [m.span for m in result.matches] == [(0, 0), (1, 1), (2, 2)]


def test_sticky_matches_must_be_contiguous():
    assert [m.span for m in execute("a", "gy", "aab").matches] == [(0, 1), (1, 2)]
    assert execute("a", "y", "ba").matches == []


def test_match_cap():
    result = execute("a", "g", "aaaa", ExecGuard(max_matches=2))
    assert len(result.matches) == 2
    assert result.capped_matches


def test_sample_truncation():
    result = execute("a", "g", "aaaaa", ExecGuard(max_sample_chars=3))
    assert len(result.matches) == 3
    assert result.truncated_sample


def test_empty_sample():
    result = execute("a", "g", "")
    assert result.matches == []
    assert not result.truncated_sample
    assert result.error is None


def test_compile_failure_is_reported():
    result = execute("(", "", "x")
    assert result.matches == []
    assert result.error


def test_capture_groups():
    (match,) = execute("(?P<y>\\d{4})-(\\d{2})?", "", "2024-").matches
    year, month = match.groups
    assert (year.index, year.name, year.value, year.span) == (1, "y", "2024", (0, 4))
    assert (month.index, month.name, month.value, month.span) == (2, None, "", None)


def test_line_positions():
    result = execute("a", "g", "xa\nya\r\nza")
    lines = [m.line for m in result.matches]
    assert [line.number for line in lines] == [1, 2, 3]
    second = lines[1]
    assert (second.start, second.end) == (3, 5)
    assert second.column_start == 2


def test_case_insensitive_flag():
    assert len(execute("CAT", "gi", "cat Cat").matches) == 2


def test_ascii_mode_without_unicode_flag():
    assert execute("\\w", "", "é").matches == []
    assert len(execute("\\w", "u", "é").matches) == 1


def test_line_map():
    rows = build_line_map(execute("a", "g", "aa\nb\na").matches)
    assert [(r.line_number, r.match_count, r.first_match_span) for r in rows] == [
        (1, 2, (0, 1)),
        (3, 1, (5, 6)),
    ]


def test_line_map_empty():
    assert build_line_map([]) == []
