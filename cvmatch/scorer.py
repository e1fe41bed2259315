"""Score job postings against extracted CV facts.

Each pool adds to a running score and to the best score it could have
given. The result is the achieved share of the applicable pools, 0 to 100:

  - Skill match       40  (CV skills and required skills both present)
  - Title match       30  (CV has job titles)
  - Experience fit    20  (always; only ever subtracts)
  - Keyword match     10  (CV has search keywords)
"""
from __future__ import annotations

import dataclasses
import math
import re

from cvmatch.log import get_logger
from cvmatch.models import CVFacts, JobPosting

log = get_logger(__name__)

SKILL_WEIGHT = 40
TITLE_WEIGHT = 30
EXPERIENCE_WEIGHT = 20
KEYWORD_WEIGHT = 10

SENIORITY_TERMS: tuple[str, ...] = ("senior", "lead", "manager")
JUNIOR_YEARS_LIMIT = 3
SENIORITY_PENALTY = -15
YEARS_PENALTY_STEP = 10
YEARS_PENALTY_FLOOR = -20

_YEARS_RE = re.compile(r"(\d+)\+?\s*years?")


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def round_half_up(value: float, ndigits: int = 0) -> float:
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def _skills_overlap(cv_skill: str, required: str) -> bool:
    a, b = _normalize(cv_skill), _normalize(required)
    return a in b or b in a


def skill_points(job: JobPosting, facts: CVFacts) -> float:
    matched = [
        skill for skill in facts.skills
        if any(_skills_overlap(skill, req) for req in job.required_skills)
    ]
    return len(matched) / len(facts.skills) * SKILL_WEIGHT


def title_points(job: JobPosting, facts: CVFacts) -> float:
    title = _normalize(job.title)
    # Max, not sum: several matching titles still earn one title bonus.
    return TITLE_WEIGHT if any(_normalize(t) in title for t in facts.job_titles) else 0


def experience_penalty(job_text: str, experience_years: int) -> int:
    penalty = 0
    if any(term in job_text for term in SENIORITY_TERMS) and experience_years < JUNIOR_YEARS_LIMIT:
        penalty = SENIORITY_PENALTY
    for match in _YEARS_RE.finditer(job_text):
        if int(match.group(1)) > experience_years + 1:
            penalty = min(penalty - YEARS_PENALTY_STEP, YEARS_PENALTY_FLOOR)
    return penalty


def keyword_points(job_text: str, facts: CVFacts) -> float:
    hits = sum(1 for kw in facts.search_keywords if _normalize(kw) in job_text)
    return hits / len(facts.search_keywords) * KEYWORD_WEIGHT


def score_job(job: JobPosting, facts: CVFacts) -> int:
    score = 0.0
    max_possible = 0
    job_text = f"{job.title} {job.description}".lower()

    if job.required_skills and facts.skills:
        score += skill_points(job, facts)
        max_possible += SKILL_WEIGHT

    if facts.job_titles:
        score += title_points(job, facts)
        max_possible += TITLE_WEIGHT

    score += experience_penalty(job_text, facts.experience_years)
    max_possible += EXPERIENCE_WEIGHT

    if facts.search_keywords:
        score += keyword_points(job_text, facts)
        max_possible += KEYWORD_WEIGHT

    if not max_possible:
        return 0
    return int(round_half_up(max(0.0, score / max_possible) * 100))


def score_jobs(jobs: list[JobPosting], facts: CVFacts) -> list[JobPosting]:
    """Return scored copies; the inputs are left untouched."""
    scored = [dataclasses.replace(job, relevance_score=score_job(job, facts)) for job in jobs]
    log.debug("Scored %d jobs", len(scored))
    return scored
