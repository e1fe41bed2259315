"""Extract structured CV facts with the language model.

The extractor never raises: any transport, parse or shape problem yields
``CVFacts.empty()`` so the search can still run with no CV signal.
"""
from __future__ import annotations

import json
import time
from typing import Any, Callable

from cvmatch.llm import TextModel
from cvmatch.log import get_logger
from cvmatch.models import NOT_SPECIFIED, CVFacts
from cvmatch.retry import RetryPolicy, call_with_retry
from cvmatch.sanitize import clean_json_response

log = get_logger(__name__)

CV_CHAR_LIMIT = 5000

_FACTS_PROMPT = """\
Analyze this CV/resume comprehensively for ALL industries and job types.
Extract information for ANY profession: healthcare, finance, education, retail,
hospitality, construction, legal, creative, etc.

Return ONLY valid JSON with this structure:

{{
  "skills": ["skill1", "skill2", "skill3"],
  "experienceYears": 0,
  "jobTitles": ["title1", "title2"],
  "industries": ["industry1", "industry2"],
  "education": "education level",
  "searchKeywords": ["optimized", "search", "terms"]
}}

Make sure searchKeywords contains 5-8 optimized terms for job searching.

CV Text:
{cv_text}
"""


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def _years(value: Any) -> int:
    # bool is an int subclass; a true/false answer is not a year count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def _education(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return NOT_SPECIFIED


def facts_from_payload(payload: Any) -> CVFacts:
    """Apply the per-field default table to a decoded model answer."""
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return CVFacts(
        skills=_string_list(payload.get("skills")),
        experience_years=_years(payload.get("experienceYears")),
        job_titles=_string_list(payload.get("jobTitles")),
        industries=_string_list(payload.get("industries")),
        education=_education(payload.get("education")),
        search_keywords=_string_list(payload.get("searchKeywords")),
    )


class CVFactExtractor:
    def __init__(
        self,
        model: TextModel,
        policy: RetryPolicy | None = None,
        *,
        char_limit: int = CV_CHAR_LIMIT,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.model = model
        self.policy = policy or RetryPolicy()
        self.char_limit = char_limit
        self._sleep = sleep or time.sleep

    def build_prompt(self, cv_text: str) -> str:
        return _FACTS_PROMPT.format(cv_text=cv_text[: self.char_limit])

    def extract(self, cv_text: str) -> CVFacts:
        prompt = self.build_prompt(cv_text)
        try:
            raw = call_with_retry(
                lambda: self.model.generate(prompt),
                self.policy,
                sleep=self._sleep,
                label="cv-facts",
            )
            cleaned = clean_json_response(raw)
            log.debug("CV analysis: %s", cleaned)
            facts = facts_from_payload(json.loads(cleaned))
        except Exception as exc:
            log.warning("CV fact extraction failed (%s), continuing with empty facts", exc)
            return CVFacts.empty()

        log.info(
            "CV analysis completed — skills=%d, experience=%d, titles=%d",
            len(facts.skills),
            facts.experience_years,
            len(facts.job_titles),
        )
        return facts
