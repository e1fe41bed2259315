"""FastAPI application exposing CV search, review and interview preparation.

Run with ``uvicorn --factory cvmatch.api:create_app``.
"""
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from cvmatch.interview import InterviewQuestionGenerator, session_type
from cvmatch.llm import GroqTextModel
from cvmatch.log import get_logger
from cvmatch.review import CVReviewer
from cvmatch.search import InputValidationError, SearchOrchestrator, build_orchestrator

log = get_logger(__name__)

SEARCH_PATH = "/api/search/search-with-cv"

SERVER_ERROR_MESSAGE = "Failed to process your request"
SERVER_ERROR_SUGGESTION = "Please try again later or check your network connection"


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchRequest(_Payload):
    cv_text: str | None = Field(default=None, alias="cvText")
    location: str = ""


class AnalyzeRequest(_Payload):
    cv_text: str | None = Field(default=None, alias="cvText")


class EnhanceRequest(_Payload):
    original_cv: str | None = Field(default=None, alias="originalCv")
    selected_errors: list[dict[str, Any]] | None = Field(default=None, alias="selectedErrors")


class QuestionsRequest(_Payload):
    cv: str | None = None
    job_description: str | None = Field(default=None, alias="jobDescription")


def _invalid_input(message: str, suggestion: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message, "code": "INVALID_INPUT", "suggestion": suggestion},
    )


def _server_error() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": SERVER_ERROR_MESSAGE,
            "code": "SERVER_ERROR",
            "suggestion": SERVER_ERROR_SUGGESTION,
        },
    )


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": message})


def create_app(
    orchestrator: SearchOrchestrator | None = None,
    reviewer: CVReviewer | None = None,
    interviewer: InterviewQuestionGenerator | None = None,
) -> FastAPI:
    app = FastAPI(
        title="CV Match API",
        description="CV analysis, interview preparation and relevance-ranked job search",
        version="0.1.0",
    )
    if reviewer is None or interviewer is None:
        model = GroqTextModel.from_env()
        reviewer = reviewer or CVReviewer(model)
        interviewer = interviewer or InterviewQuestionGenerator(model)
    app.state.orchestrator = orchestrator or build_orchestrator()
    app.state.reviewer = reviewer
    app.state.interviewer = interviewer

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        log.info("Rejected malformed body on %s: %s", request.url.path, exc.errors())
        if request.url.path != SEARCH_PATH:
            return _bad_request("Invalid request body")
        return _invalid_input("Invalid request body", "Please send a JSON object with the documented fields")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": "cvmatch"}

    @app.post(SEARCH_PATH)
    def search_with_cv(payload: SearchRequest, request: Request):
        orchestrator: SearchOrchestrator = request.app.state.orchestrator
        try:
            result = orchestrator.run(payload.cv_text or "", payload.location)
        except InputValidationError as exc:
            return _invalid_input(str(exc), exc.suggestion)
        except Exception:
            log.exception("Search failed")
            return _server_error()

        return {
            "success": True,
            "jobs": [job.to_dict() for job in result.jobs],
            "cvDetails": result.facts.to_details(),
            "searchSummary": result.summary.to_dict(),
        }

    @app.post("/api/cv_enhancer/analyze")
    def analyze_cv(payload: AnalyzeRequest, request: Request):
        if not payload.cv_text:
            return _bad_request("CV text is required")
        try:
            analysis = request.app.state.reviewer.analyze(payload.cv_text)
        except Exception:
            log.exception("CV analysis failed")
            return JSONResponse(status_code=500, content={"success": False, "message": "Failed to analyze CV"})
        return {"success": True, "analysis": analysis}

    @app.post("/api/cv_enhancer/enhance")
    def enhance_cv(payload: EnhanceRequest, request: Request):
        if not payload.original_cv or not payload.selected_errors:
            return _bad_request("Original CV and selected errors are required")
        try:
            enhanced = request.app.state.reviewer.enhance(payload.original_cv, payload.selected_errors)
        except Exception:
            log.exception("CV enhancement failed")
            return JSONResponse(status_code=500, content={"success": False, "message": "Failed to enhance CV"})
        return {"success": True, "enhancedCv": enhanced}

    @app.post("/api/cv_reader/generate-questions")
    def generate_questions(payload: QuestionsRequest, request: Request):
        if not payload.cv:
            return _bad_request("CV is a required field")
        try:
            questions = request.app.state.interviewer.generate(payload.cv, payload.job_description)
        except Exception:
            log.exception("Interview question generation failed")
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Failed to generate interview questions"},
            )
        return {
            "success": True,
            "sessionType": session_type(payload.job_description),
            "totalQuestions": len(questions),
            "questions": [q.to_dict() for q in questions],
        }

    return app

