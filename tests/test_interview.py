from __future__ import annotations

import json

import pytest

from cvmatch.interview import (
    CV_ONLY,
    CV_WITH_JOB,
    InterviewQuestionGenerator,
    build_prompt,
    generic_questions,
    parse_questions,
    session_type,
)
from tests.fakes import FakeModel

pytestmark = pytest.mark.unit


def test_prompt_with_job_description_asks_for_job_specific_questions() -> None:
    prompt = build_prompt("My CV", "Build payment APIs")
    assert "My CV" in prompt
    assert "Build payment APIs" in prompt
    assert "Job-specific questions" in prompt
    assert '"question": "Question text here"' in prompt


def test_prompt_for_cv_only() -> None:
    prompt = build_prompt("My CV")
    assert "Job Description" not in prompt
    assert "Additional experience-based questions" in prompt


def test_session_type() -> None:
    assert session_type(None) == CV_ONLY
    assert session_type("") == CV_ONLY
    assert session_type("Backend role") == CV_WITH_JOB


def test_parse_questions_renumbers_and_fills_defaults() -> None:
    text = "```json\n" + json.dumps(
        [
            {"question": "Why Python?", "type": "technical", "difficulty": "easy", "answer": "Because."},
            {"question": "   "},
            "not an object",
            {"question_text": "Describe a conflict.", "question_type": "behavioral"},
        ]
    ) + "\n```"

    questions = parse_questions(text)

    assert [q.question for q in questions] == ["Why Python?", "Describe a conflict."]
    assert [q.order for q in questions] == [1, 2]
    assert questions[1].type == "behavioral"
    assert questions[1].difficulty == "medium"
    assert questions[1].answer == "Answer not provided"


@pytest.mark.parametrize("text", ["Sorry, I can't.", "[]", '{"question": "x"}', '[{"answer": "no question"}]'])
def test_parse_questions_falls_back_to_generic_set(text: str) -> None:
    questions = parse_questions(text)
    assert len(questions) == 10
    assert questions[0].question == "Tell me about yourself and your professional background."
    assert [q.order for q in questions] == list(range(1, 11))


def test_generic_questions_are_fresh_copies() -> None:
    first = generic_questions()
    first[0].order = 99
    assert generic_questions()[0].order == 1


def test_generator_uses_model_answer(fake_sleep) -> None:
    model = FakeModel(json.dumps([{"question": "Tell me about X.", "answer": "X is..."}]))
    questions = InterviewQuestionGenerator(model, sleep=fake_sleep).generate("cv", "job")

    assert len(questions) == 1
    assert questions[0].to_dict() == {
        "question": "Tell me about X.",
        "type": "general",
        "difficulty": "medium",
        "order": 1,
        "answer": "X is...",
    }
    assert "answer" not in questions[0].to_dict(include_answer=False)
    assert "job" in model.prompts[0]
