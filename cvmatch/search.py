"""
CV-driven job search.

Runs: validate → extract facts → primary search → location filter → dedup
→ (fallback search when nothing survived) → score → rank → summarize.
"""
from __future__ import annotations

import enum

from cvmatch.config import SearchSettings, get_env, load_settings
from cvmatch.cv_facts import CVFactExtractor
from cvmatch.filters import deduplicate, filter_by_location
from cvmatch.llm import GroqTextModel
from cvmatch.log import get_logger
from cvmatch.models import CVFacts, JobPosting, SearchResult, SearchSummary
from cvmatch.query import build_query, fallback_term
from cvmatch.retry import RetryPolicy
from cvmatch.scorer import round_half_up, score_jobs
from cvmatch.sources import JobSearchBase, get_source

log = get_logger(__name__)

ALL_LOCATIONS = "All locations"


class InputValidationError(ValueError):
    """The request cannot start the pipeline; reported to the client as-is."""

    def __init__(self, message: str, suggestion: str = "") -> None:
        super().__init__(message)
        self.suggestion = suggestion


class SearchStage(enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    DONE = "done"


def validate_cv_text(cv_text: str | None, min_chars: int = 50) -> str:
    if not isinstance(cv_text, str) or len(cv_text.strip()) < min_chars:
        raise InputValidationError(
            f"CV text must be at least {min_chars} characters",
            suggestion="Please paste your complete CV/resume text",
        )
    return cv_text


def summarize(jobs: list[JobPosting], location: str) -> SearchSummary:
    average = 0.0
    if jobs:
        average = round_half_up(sum(j.relevance_score or 0 for j in jobs) / len(jobs), 1)
    return SearchSummary(
        returned_jobs=len(jobs),
        search_location=location if location and location.strip() else ALL_LOCATIONS,
        average_relevance_score=average,
    )


class SearchOrchestrator:
    def __init__(
        self,
        extractor: CVFactExtractor,
        source: JobSearchBase,
        settings: SearchSettings | None = None,
    ) -> None:
        self.extractor = extractor
        self.source = source
        self.settings = settings or SearchSettings()

    def _candidates(self, facts: CVFacts, location: str) -> list[JobPosting]:
        """Primary search, then the one-term fallback when nothing survives."""
        stage = SearchStage.PRIMARY
        jobs: list[JobPosting] = []
        while stage is not SearchStage.DONE:
            if stage is SearchStage.PRIMARY:
                query = build_query(facts)
                log.info("Searching for %r in %r", query, location or ALL_LOCATIONS.lower())
                jobs = self.source.search(query, location, self.settings.primary_limit)
                log.info("Found %d jobs before location filtering", len(jobs))
                if location.strip():
                    jobs = filter_by_location(jobs, location)
                    log.info("After location filtering: %d jobs", len(jobs))
                jobs = deduplicate(jobs)
                log.info("Total unique jobs found: %d", len(jobs))
                stage = SearchStage.DONE if jobs else SearchStage.FALLBACK
            else:
                log.info("Primary search empty — attempting fallback search")
                jobs = self.source.fallback_search(fallback_term(facts), self.settings.fallback_limit)
                if location.strip():
                    jobs = filter_by_location(jobs, location)
                log.info("Fallback results: %d jobs found", len(jobs))
                stage = SearchStage.DONE
        return jobs

    def run(self, cv_text: str, location: str = "") -> SearchResult:
        validate_cv_text(cv_text, self.settings.min_cv_chars)
        location = location or ""

        facts = self.extractor.extract(cv_text)
        jobs = self._candidates(facts, location)

        ranked = sorted(score_jobs(jobs, facts), key=lambda j: j.relevance_score or 0, reverse=True)
        ranked = ranked[: self.settings.max_results]
        summary = summarize(ranked, location)
        log.info(
            "Search completed — returning %d jobs, average relevance %.1f",
            summary.returned_jobs,
            summary.average_relevance_score,
        )
        return SearchResult(jobs=ranked, facts=facts, summary=summary)


def build_orchestrator(settings: SearchSettings | None = None) -> SearchOrchestrator:
    """Wire the production model and job source from the environment."""
    settings = settings or load_settings()
    extractor = CVFactExtractor(
        GroqTextModel.from_env(),
        RetryPolicy(max_attempts=settings.retry_attempts, base_delay=settings.retry_base_delay),
        char_limit=settings.cv_char_limit,
    )
    return SearchOrchestrator(extractor, get_source(get_env, settings), settings)
