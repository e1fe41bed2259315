"""JSearch (RapidAPI) client: aggregated job listings mapped onto JobPosting."""
from __future__ import annotations

import math
import secrets
import time
from datetime import datetime, timezone
from typing import Any

import requests

from cvmatch.config import SearchSettings
from cvmatch.log import get_logger
from cvmatch.models import NOT_SPECIFIED, JobPosting
from cvmatch.sources.base import JobSearchBase

log = get_logger(__name__)

# Scanned in this order; the first 8 hits become a posting's required skills.
SKILL_VOCABULARY: list[str] = [
    "JavaScript", "Python", "Java", "React", "Node.js", "SQL", "HTML", "CSS",
    "Project Management", "Communication", "Leadership", "Problem Solving",
    "Excel", "PowerPoint", "Salesforce", "CRM", "Marketing", "Sales",
    "Customer Service", "Data Analysis", "Machine Learning", "AI",
    "Nursing", "Healthcare", "Finance", "Accounting", "Legal", "Education",
]
MAX_REQUIRED_SKILLS = 8
MAX_QUERY_TOKENS = 3


def extract_required_skills(description: str) -> list[str]:
    text = (description or "").lower()
    found = [skill for skill in SKILL_VOCABULARY if skill.lower() in text]
    return found[:MAX_REQUIRED_SKILLS]


def _parse_timestamp(value: str) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_posted(value: str | None, now: datetime | None = None) -> str:
    """Human-relative age of an ISO timestamp, e.g. ``"3 days ago"``."""
    posted = _parse_timestamp(value or "")
    if posted is None:
        return "Recently"
    now = now or datetime.now(timezone.utc)
    days = max(1, math.ceil(abs((now - posted).total_seconds()) / 86400))
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 14:
        return "1 week ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    return f"{days // 30} months ago"


def _amount(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_salary(currency: Any, minimum: Any, maximum: Any) -> str:
    if not currency or not minimum:
        return NOT_SPECIFIED
    salary = f"{currency} {_amount(minimum)}"
    if maximum:
        salary += f" - {_amount(maximum)}"
    return salary


def format_location(hit: dict) -> str:
    city, state = hit.get("job_city"), hit.get("job_state")
    if city and state:
        return f"{city}, {state}"
    return hit.get("job_country") or NOT_SPECIFIED


def truncate_description(text: str | None, limit: int = 300) -> str:
    if not text:
        return "No description available"
    return text[:limit] + "..."


def _fallback_id() -> str:
    # Unique within one request; good enough for dedup, not a global key.
    return f"{time.time_ns()}-{secrets.token_hex(4)}"


def normalize_hit(hit: dict, *, description_chars: int = 300, detailed: bool = True) -> JobPosting:
    """Map one raw JSearch record onto a :class:`JobPosting`.

    ``detailed=False`` is the fallback shape: no posting age or salary.
    """
    raw_description = hit.get("job_description") or ""
    return JobPosting(
        id=str(hit.get("job_id") or _fallback_id()),
        title=hit.get("job_title") or "No title",
        company=hit.get("employer_name") or "Unknown Company",
        location=format_location(hit),
        description=truncate_description(raw_description, description_chars),
        employment_type=hit.get("job_employment_type") or "Full-time",
        posted_at=(
            format_posted(hit.get("job_posted_at_datetime_utc"))
            if detailed and hit.get("job_posted_at_datetime_utc")
            else "Recently"
        ),
        salary=(
            format_salary(
                hit.get("job_salary_currency"),
                hit.get("job_min_salary"),
                hit.get("job_max_salary"),
            )
            if detailed
            else NOT_SPECIFIED
        ),
        apply_url=hit.get("job_apply_link") or "#",
        required_skills=extract_required_skills(raw_description),
    )


class JSearchSource(JobSearchBase):
    name = "JSearch"
    BASE = "https://jsearch.p.rapidapi.com"

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.settings = settings or SearchSettings()

    def _fetch(self, params: dict[str, str]) -> list[dict] | None:
        """Return the raw ``data`` list, or None on any failure."""
        if not self.api_key:
            log.error("RAPIDAPI_KEY is not set")
            return None
        try:
            r = self.session.get(
                f"{self.BASE}/search",
                params=params,
                headers={
                    "X-RapidAPI-Key": self.api_key,
                    "X-RapidAPI-Host": "jsearch.p.rapidapi.com",
                },
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as exc:
            log.error("JSearch request failed: %s", exc)
            return None
        if r.status_code == 403:
            log.warning("JSearch 403 — subscribe at https://rapidapi.com/letscrape-6bRDu3Sgupt/api/jsearch")
        if not r.ok:
            log.error("JSearch error: status=%s body=%s", r.status_code, r.text[:500])
            return None
        try:
            data = r.json()
        except ValueError:
            log.error("JSearch returned non-JSON body: %s", r.text[:500])
            return None
        hits = data.get("data") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            log.error("Unexpected JSearch response structure: %s", str(data)[:500])
            return None
        return [h for h in hits if isinstance(h, dict)]

    def _normalize(self, hits: list[dict], *, detailed: bool) -> list[JobPosting]:
        try:
            return [
                normalize_hit(hit, description_chars=self.settings.description_chars, detailed=detailed)
                for hit in hits
            ]
        except (TypeError, AttributeError) as exc:
            log.error("Malformed JSearch record: %s", exc)
            return []

    def search(self, query: str, location: str = "", limit: int = 20) -> list[JobPosting]:
        keywords = " ".join(query.split()[:MAX_QUERY_TOKENS])
        location = (location or "").strip()
        api_query = f"{keywords} {location}" if location else keywords
        log.info("JSearch query=%r location=%r", api_query, location)
        hits = self._fetch(
            {
                "query": api_query,
                "page": "1",
                "num_pages": "1",
                "country": self.settings.country,
            }
        )
        if hits is None:
            return []
        return self._normalize(hits[:limit], detailed=True)

    def fallback_search(self, term: str, limit: int = 15) -> list[JobPosting]:
        log.info("JSearch fallback query=%r", term)
        hits = self._fetch({"query": term, "page": "1", "num_pages": "1"})
        if hits is None:
            return []
        return self._normalize(hits[:limit], detailed=False)
