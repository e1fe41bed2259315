from .base import JobSearchBase
from .jsearch import JSearchSource

from cvmatch.config import SearchSettings
from cvmatch.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSearchBase", "JSearchSource", "get_source"]


def get_source(env_getter, settings: SearchSettings | None = None) -> JobSearchBase:
    """Build the job listing provider from environment credentials."""
    source = JSearchSource(env_getter("RAPIDAPI_KEY"), settings=settings)
    if source.api_key:
        log.info("Registered source: %s (country=%s)", source.name, source.settings.country)
    else:
        log.warning("RAPIDAPI_KEY is not set, job searches will return no results")
    return source
