"""Data models for CV facts, job postings and search results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

NOT_SPECIFIED = "Not specified"


@dataclass(frozen=True)
class CVFacts:
    skills: tuple[str, ...] = ()
    experience_years: int = 0
    job_titles: tuple[str, ...] = ()
    industries: tuple[str, ...] = ()
    education: str = NOT_SPECIFIED
    search_keywords: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> CVFacts:
        return cls()

    def to_details(self) -> dict[str, Any]:
        """Truncated view returned to HTTP clients."""
        return {
            "skills": list(self.skills[:15]),
            "experienceYears": self.experience_years,
            "jobTitles": list(self.job_titles[:5]),
            "industries": list(self.industries[:3]),
            "education": self.education,
        }


@dataclass
class JobPosting:
    id: str
    title: str
    company: str
    location: str
    description: str
    employment_type: str = "Full-time"
    platform: str = "Job Search"
    posted_at: str = "Recently"
    salary: str = NOT_SPECIFIED
    apply_url: str = "#"
    required_skills: list[str] = field(default_factory=list)
    relevance_score: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "type": self.employment_type,
            "platform": self.platform,
            "posted": self.posted_at,
            "description": self.description,
            "salary": self.salary,
            "url": self.apply_url,
            "requiredSkills": list(self.required_skills),
            "jobId": self.id,
            "relevanceScore": self.relevance_score or 0,
        }


@dataclass
class SearchSummary:
    returned_jobs: int
    search_location: str
    average_relevance_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "returnedJobs": self.returned_jobs,
            "searchLocation": self.search_location,
            "averageRelevanceScore": self.average_relevance_score,
        }


@dataclass
class SearchResult:
    jobs: list[JobPosting]
    facts: CVFacts
    summary: SearchSummary


@dataclass
class InterviewQuestion:
    question: str
    type: str
    difficulty: str
    answer: str
    order: int

    def to_dict(self, include_answer: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "question": self.question,
            "type": self.type,
            "difficulty": self.difficulty,
            "order": self.order,
        }
        if include_answer:
            data["answer"] = self.answer
        return data
