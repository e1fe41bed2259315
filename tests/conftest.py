from __future__ import annotations

import pytest

from cvmatch.models import CVFacts


@pytest.fixture
def facts() -> CVFacts:
    return CVFacts(
        skills=("Python", "AWS", "SQL"),
        experience_years=5,
        job_titles=("Backend Engineer", "Software Engineer"),
        industries=("Technology",),
        education="BSc Computer Science",
        search_keywords=("python", "backend", "aws", "cloud", "api"),
    )


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]):
    return sleeps.append
