"""Location filtering and duplicate removal for job candidates."""
from __future__ import annotations

from cvmatch.models import JobPosting

# Postings tagged with any of these pass every location filter.
GLOBAL_LOCATION_MARKERS: tuple[str, ...] = ("remote", "anywhere", "worldwide")


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def filter_by_location(jobs: list[JobPosting], location: str) -> list[JobPosting]:
    wanted = _normalize(location)
    if not wanted:
        return jobs
    kept: list[JobPosting] = []
    for job in jobs:
        job_loc = _normalize(job.location)
        if wanted in job_loc or any(marker in job_loc for marker in GLOBAL_LOCATION_MARKERS):
            kept.append(job)
    return kept


def dedup_key(job: JobPosting) -> tuple[str, str]:
    return _normalize(job.title), _normalize(job.company)


def deduplicate(jobs: list[JobPosting]) -> list[JobPosting]:
    """Drop later postings with the same (title, company); first one wins."""
    seen: set[tuple[str, str]] = set()
    unique: list[JobPosting] = []
    for job in jobs:
        key = dedup_key(job)
        if key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique
