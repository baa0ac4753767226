from unittest.mock import Mock

import pytest

from blindhire.errors import ValidationError
from blindhire.services.question_source import (
    LocalQuestionSource,
    QuestionGenerator,
    RemoteQuestionSource,
)
from blindhire.services.questions import (
    normalize_question_ids,
    public_questions,
    validate_question_set,
)


def _assert_valid(questions):
    ids = [q["question_id"] for q in questions]
    assert len(ids) == len(set(ids))
    for question in questions:
        assert question["question"]
        assert len(question["options"]) >= 2
        assert question["correct_answer"] in question["options"]


@pytest.mark.parametrize("skills", [[], ["python"], ["python", "sql", "docker", "aws", "react", "git"]])
def test_local_source_always_yields_at_least_three_valid_questions(skills):
    questions = LocalQuestionSource().generate("Backend Engineer", skills)
    assert 3 <= len(questions) <= 5
    _assert_valid(questions)


def test_local_source_is_deterministic():
    source = LocalQuestionSource()
    assert source.generate("Role", ["python", "sql"]) == source.generate("Role", ["python", "sql"])


def test_generator_falls_back_when_remote_fails():
    client = Mock()
    client.name = "gemini"
    client.generate_json.side_effect = TimeoutError("deadline exceeded")

    generated_by, questions = QuestionGenerator([RemoteQuestionSource(client)]).generate("Role", ["python"])

    assert generated_by == "fallback"
    _assert_valid(questions)


def test_generator_uses_remote_questions():
    client = Mock()
    client.name = "openai"
    client.generate_json.return_value = {
        "questions": [
            {"questionId": "q1", "question": f"Q{i}?", "options": ["a", "b", "c", "d"], "correctAnswer": "b"}
            for i in range(4)
        ]
    }

    generated_by, questions = QuestionGenerator([RemoteQuestionSource(client)]).generate("Role", ["python"])

    assert generated_by == "ai"
    assert len(questions) == 4
    _assert_valid(questions)


def test_remote_source_rejects_too_few_questions():
    client = Mock()
    client.name = "gemini"
    client.generate_json.return_value = {"questions": [{"question": "Q?", "options": ["a", "b"], "correct_answer": "a"}]}
    assert RemoteQuestionSource(client).generate("Role", []) is None


def test_normalize_question_ids_makes_ids_unique():
    questions = normalize_question_ids([{"question_id": "cq1"}, {"question_id": "cq1"}, {}], prefix="cq")
    assert [q["question_id"] for q in questions] == ["cq1", "cq2", "cq3"]


def test_validate_question_set_rejects_bad_answer():
    with pytest.raises(ValidationError):
        validate_question_set([{"question": "Q?", "options": ["a", "b"], "correct_answer": "c"}])


def test_public_questions_hide_correct_answer():
    questions = LocalQuestionSource().generate("Role", ["python"])
    assert all("correct_answer" not in q for q in public_questions(questions))
