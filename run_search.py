#!/usr/bin/env python3
"""Entry point: rank jobs for a CV text file.

Usage: python run_search.py path/to/cv.txt [location]
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cvmatch.log import get_logger

log = get_logger(__name__)


def _usage() -> None:
    print()
    print("  Usage: python run_search.py path/to/cv.txt [location]")
    print()


if __name__ == "__main__":
    if len(sys.argv) < 2 or not Path(sys.argv[1]).is_file():
        _usage()
        sys.exit(1)

    from cvmatch.search import InputValidationError, build_orchestrator

    cv_text = Path(sys.argv[1]).read_text(encoding="utf-8", errors="ignore")
    location = " ".join(sys.argv[2:])

    try:
        result = build_orchestrator().run(cv_text, location)
    except InputValidationError as exc:
        log.error("%s — %s", exc, exc.suggestion)
        sys.exit(2)

    log.info("Search complete.")
    log.info("  Location: %s", result.summary.search_location)
    log.info("  Jobs returned: %d", result.summary.returned_jobs)
    log.info("  Average relevance: %.1f", result.summary.average_relevance_score)
    for rank, job in enumerate(result.jobs, start=1):
        log.info("  %2d. [%3d] %s — %s (%s)", rank, job.relevance_score, job.title, job.company, job.location)
