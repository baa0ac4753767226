import pytest

from blindhire.services.match_scorer import normalize_skills, percent, score_skills


def test_empty_requirement_scores_zero():
    assert score_skills([], ["python"]) == (0, [], [])
    assert score_skills(["  ", ""], ["python"]) == (0, [], [])


def test_identical_sets_score_hundred():
    result = score_skills(["Python", "SQL"], ["sql", "python"])
    assert result.score == 100
    assert result.matched == ["python", "sql"]
    assert result.missing == []


def test_partial_match_lists_missing_skills():
    result = score_skills(["Python", "SQL", "Docker", "AWS"], ["python", "docker"])
    assert result.score == 50
    assert result.matched == ["docker", "python"]
    assert result.missing == ["aws", "sql"]


def test_case_and_whitespace_insensitive():
    assert score_skills([" PYTHON "], ["python"]).score == 100


def test_order_independent():
    required = ["react", "Node", "SQL", "docker"]
    candidate = ["sql", "React"]
    first = score_skills(required, candidate)
    second = score_skills(list(reversed(required)), list(reversed(candidate)))
    assert first == second


def test_duplicates_collapse():
    result = score_skills(["python", "Python", "sql"], ["python"])
    assert result.score == 50
    assert normalize_skills(["A", "a", " a "]) == ["a"]


def test_score_always_in_range():
    for matched in range(0, 8):
        result = score_skills([f"s{i}" for i in range(7)], [f"s{i}" for i in range(matched)])
        assert 0 <= result.score <= 100


@pytest.mark.parametrize("part,whole,expected", [
    (1, 8, 13),   # 12.5 rounds up
    (1, 3, 33),
    (2, 3, 67),
    (3, 5, 60),
    (0, 0, 0),
])
def test_percent_rounds_half_up(part, whole, expected):
    assert percent(part, whole) == expected
