"""Turn CV facts into job-search query terms."""
from __future__ import annotations

from cvmatch.models import CVFacts

MAX_QUERY_TERMS = 3


def build_query(facts: CVFacts) -> str:
    """Keywords first, then skills, then the latest title; at most 3 terms.

    The location is passed to the search call separately and never lands here.
    """
    candidates = [
        *facts.search_keywords[:2],
        *facts.skills[:2],
        *facts.job_titles[:1],
    ]
    terms = [t.strip() for t in candidates if t and t.strip()]
    return " ".join(terms[:MAX_QUERY_TERMS])


def fallback_term(facts: CVFacts) -> str:
    for options in (facts.job_titles, facts.skills):
        if options:
            return options[0]
    return "jobs"
