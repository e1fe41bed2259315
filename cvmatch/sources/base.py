from abc import ABC, abstractmethod

from cvmatch.models import JobPosting


class JobSearchBase(ABC):
    """A job listing provider.

    Implementations never raise for transport or payload problems; they log
    and return an empty list so the caller can move on to the fallback.
    """

    name: str = "base"

    @abstractmethod
    def search(self, query: str, location: str = "", limit: int = 20) -> list[JobPosting]:
        """Full search: posting age and salary are filled in when known."""

    @abstractmethod
    def fallback_search(self, term: str, limit: int = 15) -> list[JobPosting]:
        """Single-term search with no country or location constraint."""
