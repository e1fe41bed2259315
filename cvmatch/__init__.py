"""CV analysis, interview preparation and relevance-ranked job search."""

__version__ = "0.1.0"
