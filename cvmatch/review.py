"""CV quality review and targeted rewrite using the language model."""
from __future__ import annotations

import json
import time
from typing import Any, Callable

from cvmatch.llm import TextModel
from cvmatch.log import get_logger
from cvmatch.retry import RetryPolicy, call_with_retry
from cvmatch.sanitize import clean_json_response

log = get_logger(__name__)

_ANALYSIS_PROMPT = """\
Analyze the following CV and provide detailed feedback. Please respond in JSON
format with the following structure:
{{
  "overallGrade": "A/B/C/D/F",
  "score": number (0-100),
  "strengths": ["strength1", "strength2", ...],
  "errors": [
    {{
      "category": "Grammar/Formatting/Content/Structure",
      "issue": "description of the issue",
      "suggestion": "how to fix it",
      "severity": "High/Medium/Low"
    }}
  ],
  "recommendations": ["recommendation1", "recommendation2", ...],
  "summary": "Overall summary of the CV quality"
}}

CV Content:
{cv_text}
"""

_ENHANCE_PROMPT = """\
Please enhance the following CV by fixing these specific issues:

Issues to fix:
{issues}

Original CV:
{cv_text}

Please provide an enhanced version that addresses these issues while
maintaining the original content and style. Return only the enhanced CV text
without any additional formatting or explanations.
"""


def partial_analysis() -> dict[str, Any]:
    """Returned when the model answered but not with parseable JSON."""
    return {
        "overallGrade": "C",
        "score": 75,
        "strengths": ["Experience listed", "Contact information provided"],
        "errors": [
            {
                "category": "Content",
                "issue": "Analysis could not be fully processed",
                "suggestion": "Please try again with a clearer CV format",
                "severity": "Medium",
            }
        ],
        "recommendations": ["Consider reformatting your CV", "Add more specific achievements"],
        "summary": "CV analysis completed with partial results",
    }


def format_issues(selected_errors: list[dict[str, Any]]) -> str:
    lines = []
    for error in selected_errors:
        if not isinstance(error, dict):
            continue
        lines.append(f"- {error.get('issue', '')}: {error.get('suggestion', '')}")
    return "\n".join(lines)


class CVReviewer:
    def __init__(
        self,
        model: TextModel,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.model = model
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or time.sleep

    def _generate(self, prompt: str, label: str) -> str:
        return call_with_retry(
            lambda: self.model.generate(prompt), self.policy, sleep=self._sleep, label=label
        )

    def analyze(self, cv_text: str) -> dict[str, Any]:
        raw = self._generate(_ANALYSIS_PROMPT.format(cv_text=cv_text), "cv-analysis")
        try:
            analysis = json.loads(clean_json_response(raw))
        except json.JSONDecodeError as exc:
            log.warning("CV analysis was not valid JSON (%s), returning partial result", exc)
            return partial_analysis()
        if not isinstance(analysis, dict):
            log.warning("CV analysis was %s, not an object", type(analysis).__name__)
            return partial_analysis()
        log.info("CV analysis complete — grade=%s", analysis.get("overallGrade"))
        return analysis

    def enhance(self, original_cv: str, selected_errors: list[dict[str, Any]]) -> str:
        prompt = _ENHANCE_PROMPT.format(issues=format_issues(selected_errors), cv_text=original_cv)
        enhanced = self._generate(prompt, "cv-enhance").strip()
        log.info("CV enhanced — %d issues addressed, %d chars", len(selected_errors), len(enhanced))
        return enhanced
