# blindhire/services/match_scorer.py
from collections import namedtuple
from typing import Iterable, List

MatchResult = namedtuple("MatchResult", ["score", "matched", "missing"])


def normalize_skills(skills: Iterable[str]) -> List[str]:
    """Trim, lower-case and de-duplicate skill names, dropping blanks."""
    seen = set()
    for skill in skills or []:
        cleaned = str(skill or "").strip().lower()
        if cleaned:
            seen.add(cleaned)
    return sorted(seen)


def score_skills(required_skills: Iterable[str], candidate_skills: Iterable[str]) -> MatchResult:
    """
    Skill-overlap score between a job's required skills and a candidate's skills.

    Comparison is case-insensitive exact match. An empty requirement scores 0,
    never 100. Output lists are sorted so that input order never matters.
    """
    required = normalize_skills(required_skills)
    if not required:
        return MatchResult(0, [], [])

    candidate = set(normalize_skills(candidate_skills))
    matched = [skill for skill in required if skill in candidate]
    missing = [skill for skill in required if skill not in candidate]

    return MatchResult(percent(len(matched), len(required)), matched, missing)


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half-up; round() would send 12.5 to 12."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def match_to_dict(result: MatchResult) -> dict:
    return {
        "score": result.score,
        "matched_skills": list(result.matched),
        "missing_skills": list(result.missing),
    }
