from __future__ import annotations

import json

import pytest

from cvmatch.config import SearchSettings
from cvmatch.cv_facts import CVFactExtractor
from cvmatch.search import (
    InputValidationError,
    SearchOrchestrator,
    summarize,
    validate_cv_text,
)
from tests.fakes import FACTS_JSON, FakeModel, FakeSource, make_job

pytestmark = pytest.mark.unit

CV = "Backend Engineer with 5 years of Python, AWS and SQL experience building cloud APIs."


def _orchestrator(source: FakeSource, answer=None, sleep=None) -> tuple[SearchOrchestrator, FakeModel]:
    model = FakeModel(json.dumps(FACTS_JSON) if answer is None else answer)
    extractor = CVFactExtractor(model, sleep=sleep or (lambda s: None))
    return SearchOrchestrator(extractor, source, SearchSettings()), model


def _mixed_jobs(n: int) -> list:
    jobs = []
    for i in range(n):
        if i % 3 == 0:
            jobs.append(make_job(title="Backend Engineer", company=f"Co{i}", required_skills=["Python", "SQL"],
                                 description="Python backend services on AWS cloud."))
        elif i % 3 == 1:
            jobs.append(make_job(title="Sales Associate", company=f"Co{i}", required_skills=["Sales"],
                                 description="Retail sales."))
        else:
            jobs.append(make_job(title="Senior Software Engineer", company=f"Co{i}", required_skills=["Java"],
                                 description="Senior role, 12+ years of Java."))
    return jobs


def test_run_ranks_truncates_and_summarizes() -> None:
    source = FakeSource(_mixed_jobs(30))
    orchestrator, _ = _orchestrator(source)

    result = orchestrator.run(CV)

    scores = [j.relevance_score for j in result.jobs]
    assert len(result.jobs) == 25
    assert scores == sorted(scores, reverse=True)
    assert all(0 <= s <= 100 for s in scores)
    assert result.jobs[0].title == "Backend Engineer"
    assert result.summary.returned_jobs == 25
    assert result.summary.search_location == "All locations"
    assert result.summary.average_relevance_score == round(sum(scores) / 25, 1)
    assert source.fallback_calls == []


def test_run_sends_built_query_with_primary_limit() -> None:
    source = FakeSource([make_job()])
    orchestrator, _ = _orchestrator(source)

    orchestrator.run(CV, "Austin")

    assert source.search_calls == [("python backend Python", "Austin", 30)]


def test_ties_keep_original_order() -> None:
    jobs = [
        make_job(title="Sales Associate", company="First"),
        make_job(title="Sales Associate", company="Second"),
        make_job(title="Backend Engineer", company="Best", required_skills=["Python"]),
        make_job(title="Sales Associate", company="Third"),
    ]
    orchestrator, _ = _orchestrator(FakeSource(jobs))

    result = orchestrator.run(CV)

    assert [j.company for j in result.jobs] == ["Best", "First", "Second", "Third"]


def test_duplicates_are_removed_before_scoring() -> None:
    jobs = [make_job(company="Acme", id="1"), make_job(company="acme ", id="2")]
    orchestrator, _ = _orchestrator(FakeSource(jobs))
    assert [j.id for j in orchestrator.run(CV).jobs] == ["1"]


def test_empty_primary_triggers_single_fallback_with_first_title() -> None:
    fallback = [
        make_job(company="P", location="Paris, France"),
        make_job(company="R", location="Remote"),
    ]
    source = FakeSource([], fallback)
    orchestrator, _ = _orchestrator(source)

    result = orchestrator.run(CV, "Berlin")

    assert source.fallback_calls == [("Backend Engineer", 15)]
    assert [j.company for j in result.jobs] == ["R"]
    assert result.summary.search_location == "Berlin"


def test_location_filter_emptying_primary_also_falls_back() -> None:
    source = FakeSource([make_job(location="Paris, France")], [make_job(location="Berlin, DE")])
    orchestrator, _ = _orchestrator(source)

    result = orchestrator.run(CV, "Berlin")

    assert len(source.fallback_calls) == 1
    assert [j.location for j in result.jobs] == ["Berlin, DE"]


def test_nothing_found_anywhere_gives_empty_summary() -> None:
    source = FakeSource([], [])
    orchestrator, _ = _orchestrator(source)

    result = orchestrator.run(CV)

    assert result.jobs == []
    assert result.summary.returned_jobs == 0
    assert result.summary.average_relevance_score == 0


def test_failed_extraction_still_searches_with_empty_facts() -> None:
    sleeps: list[float] = []
    source = FakeSource([])
    orchestrator, model = _orchestrator(source, answer=RuntimeError("model down"), sleep=sleeps.append)

    result = orchestrator.run(CV)

    assert len(model.prompts) == 3
    assert sleeps == [1.0, 2.0]
    assert source.search_calls[0][0] == ""
    assert source.fallback_calls == [("jobs", 15)]
    assert result.facts.skills == ()


@pytest.mark.parametrize("cv", [None, "", "too short", " " * 80, 12345])
def test_invalid_cv_is_rejected_before_any_work(cv) -> None:
    source = FakeSource([make_job()])
    orchestrator, model = _orchestrator(source)

    with pytest.raises(InputValidationError) as info:
        orchestrator.run(cv)

    assert "50 characters" in str(info.value)
    assert info.value.suggestion
    assert model.prompts == []
    assert source.search_calls == []


def test_validate_accepts_exactly_min_chars() -> None:
    assert validate_cv_text("x" * 50) == "x" * 50


def test_summarize_rounds_average_half_up() -> None:
    jobs = [make_job() for _ in range(4)]
    for job, score in zip(jobs, (50, 50, 50, 51)):
        job.relevance_score = score
    assert summarize(jobs, "Berlin").average_relevance_score == 50.3


def test_summarize_rounds_average_to_one_decimal() -> None:
    jobs = [make_job(), make_job(), make_job()]
    for job, score in zip(jobs, (70, 71, 71)):
        job.relevance_score = score
    summary = summarize(jobs, "")
    assert summary.average_relevance_score == 70.7
    assert summary.to_dict() == {
        "returnedJobs": 3,
        "searchLocation": "All locations",
        "averageRelevanceScore": 70.7,
    }
