from __future__ import annotations

import json

import pytest

from cvmatch.retry import RetryPolicy
from cvmatch.review import CVReviewer, format_issues, partial_analysis
from tests.fakes import FakeModel

pytestmark = pytest.mark.unit

ANALYSIS = {
    "overallGrade": "B",
    "score": 82,
    "strengths": ["Clear structure"],
    "errors": [
        {"category": "Grammar", "issue": "Typo in summary", "suggestion": "Fix spelling", "severity": "Low"}
    ],
    "recommendations": ["Quantify achievements"],
    "summary": "Solid CV",
}


def test_analyze_parses_fenced_answer(fake_sleep) -> None:
    model = FakeModel("Here is my review:\n```json\n" + json.dumps(ANALYSIS) + "\n```")
    analysis = CVReviewer(model, sleep=fake_sleep).analyze("My CV text")

    assert analysis == ANALYSIS
    assert "My CV text" in model.prompts[0]
    assert "overallGrade" in model.prompts[0]


@pytest.mark.parametrize("answer", ["I could not read that CV.", "[1, 2, 3]", '{"score": }'])
def test_analyze_unparseable_answer_gives_partial_result(answer: str, fake_sleep) -> None:
    analysis = CVReviewer(FakeModel(answer), sleep=fake_sleep).analyze("cv")
    assert analysis == partial_analysis()
    assert analysis["overallGrade"] == "C"
    assert analysis["score"] == 75


def test_analyze_model_failure_propagates_after_retries(sleeps, fake_sleep) -> None:
    model = FakeModel(RuntimeError("rate limited"))
    reviewer = CVReviewer(model, RetryPolicy(max_attempts=3, base_delay=1.0), sleep=fake_sleep)

    with pytest.raises(RuntimeError, match="rate limited"):
        reviewer.analyze("cv")
    assert len(model.prompts) == 3
    assert sleeps == [1.0, 2.0]


def test_enhance_lists_selected_issues(fake_sleep) -> None:
    model = FakeModel("\n  Improved CV text  \n")
    enhanced = CVReviewer(model, sleep=fake_sleep).enhance("Original CV", ANALYSIS["errors"])

    assert enhanced == "Improved CV text"
    assert "- Typo in summary: Fix spelling" in model.prompts[0]
    assert "Original CV" in model.prompts[0]


def test_format_issues_skips_non_objects() -> None:
    errors = [{"issue": "A", "suggestion": "B"}, "noise", {"issue": "C"}]
    assert format_issues(errors) == "- A: B\n- C: "
