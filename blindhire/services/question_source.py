# blindhire/services/question_source.py
"""
Question generation strategies.

``RemoteQuestionSource`` asks a generative model; ``LocalQuestionSource`` is
deterministic and always succeeds. ``QuestionGenerator`` walks the configured
sources by availability and ends with the local one.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from blindhire.services.ai_clients import available_clients
from blindhire.services.questions import normalize_question, normalize_question_ids

logger = logging.getLogger(__name__)

QUESTION_COUNT = 5
MIN_QUESTIONS = 3
GENERIC_SKILLS = ["communication", "problem solving", "teamwork"]

QUESTION_PROMPT = """Create exactly {count} multiple-choice screening questions for a job candidate.
Return ONLY valid JSON in this shape:
{{
  "questions": [
    {{
      "question_id": "q1",
      "question": "text",
      "options": ["a", "b", "c", "d"],
      "correct_answer": "one option from options"
    }}
  ]
}}
Rules:
- Questions must check real skill fit for: {job_title}.
- Use these required skills: {skills}
- Keep language simple.
- Each options array must have exactly 4 options.
- correct_answer must match one option exactly.
- Do not mention the candidate's name, gender, age or background.
- No markdown.
"""


class QuestionSource:
    name = "base"

    def generate(self, job_title: str, required_skills: Sequence[str]) -> Optional[List[dict]]:
        raise NotImplementedError


class RemoteQuestionSource(QuestionSource):
    """Wraps a generative client (Gemini or OpenAI)."""

    def __init__(self, client):
        self.client = client
        self.name = getattr(client, "name", "remote")

    def generate(self, job_title, required_skills):
        prompt = QUESTION_PROMPT.format(
            count=QUESTION_COUNT,
            job_title=job_title or "this role",
            skills=", ".join(required_skills or []) or "general professional skills",
        )
        parsed = self.client.generate_json(prompt) or {}
        raw_questions = parsed.get("questions") if isinstance(parsed, dict) else None
        questions = [
            q for q in (
                normalize_question(raw, index) for index, raw in enumerate(raw_questions or [])
            ) if q
        ][:QUESTION_COUNT]
        if len(questions) < MIN_QUESTIONS:
            return None
        return normalize_question_ids(questions)


class LocalQuestionSource(QuestionSource):
    name = "local"

    def generate(self, job_title, required_skills):
        skills = []
        for skill in required_skills or []:
            cleaned = str(skill or "").strip()
            if cleaned and cleaned.lower() not in [s.lower() for s in skills]:
                skills.append(cleaned)
        skills = skills[:QUESTION_COUNT]
        for generic in GENERIC_SKILLS:
            if len(skills) >= MIN_QUESTIONS:
                break
            if generic not in [s.lower() for s in skills]:
                skills.append(generic)

        role = job_title or "this role"
        questions = []
        for index, skill in enumerate(skills):
            correct = f"I can explain and use {skill} in projects"
            distractors = [
                f"I have only heard the term {skill}",
                f"I never worked with {skill}",
                f"I avoid tasks requiring {skill}",
            ]
            # rotate the correct option so its position is not constant
            position = index % (len(distractors) + 1)
            options = distractors[:position] + [correct] + distractors[position:]
            questions.append({
                "question_id": f"q{index + 1}",
                "question": f"Which option best demonstrates practical knowledge of {skill} for the role {role}?",
                "options": options,
                "correct_answer": correct,
            })
        return questions


class QuestionGenerator:
    def __init__(self, sources: Sequence[QuestionSource] = (), fallback: Optional[QuestionSource] = None):
        self.sources = list(sources)
        self.fallback = fallback or LocalQuestionSource()

    def generate(self, job_title: str, required_skills: Sequence[str],
                 fallback_tag: str = "fallback") -> Tuple[str, List[dict]]:
        """Returns ``(generated_by, questions)``; never raises for provider outages."""
        for source in self.sources:
            try:
                questions = source.generate(job_title, required_skills)
                if questions:
                    logger.info(f"questions generated by {source.name} for '{job_title}'")
                    return "ai", questions
                logger.warning(f"⚠️ {source.name} returned no usable questions, trying next source")
            except Exception as e:
                logger.warning(f"⚠️ {source.name} question generation failed: {e}")

        return fallback_tag, self.fallback.generate(job_title, required_skills)


def build_question_generator(config) -> QuestionGenerator:
    return QuestionGenerator([RemoteQuestionSource(client) for client in available_clients(config)])
