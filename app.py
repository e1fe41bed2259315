"""Streamlit UI for CV-driven job search, CV review and interview prep."""
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from cvmatch.config import get_env
from cvmatch.log import get_logger

log = get_logger(__name__)

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stMetric"] {
    background: rgba(255,255,255,0.6);
    padding: 0.75rem 1rem;
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.4);
}
.job-meta { color: #555; font-size: 0.9rem; }
</style>
"""

SEVERITY_ICONS = {"High": "🔴", "Medium": "🟠", "Low": "🟢"}


# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _orchestrator():
    from cvmatch.search import build_orchestrator

    return build_orchestrator()


@st.cache_resource
def _model():
    from cvmatch.llm import GroqTextModel

    return GroqTextModel.from_env()


def _sidebar_status() -> None:
    st.sidebar.markdown("**Status**")
    for label, key in (("Groq API key", "GROQ_API_KEY"), ("JSearch API key", "RAPIDAPI_KEY")):
        icon = "✅" if get_env(key) else "⬜"
        st.sidebar.markdown(f"{icon}  {label}")


def _cv_input(key: str) -> str:
    uploaded = st.file_uploader("Upload a .txt CV", type=["txt"], key=f"{key}_file")
    if uploaded is not None:
        return uploaded.read().decode("utf-8", errors="ignore")
    return st.text_area("…or paste your CV", height=220, key=f"{key}_text")


# ── Page: Job Search ─────────────────────────────────────────────────────


def page_search() -> None:
    from cvmatch.search import InputValidationError

    st.header("Job Search")
    st.write("Paste your CV and we will find and rank matching jobs.")

    cv_text = _cv_input("search")
    location = st.text_input("Location (optional)", placeholder="e.g. Austin, Remote")

    if st.button("Find Jobs", type="primary", use_container_width=True):
        with st.spinner("Analyzing your CV and searching jobs…"):
            try:
                st.session_state["search_result"] = _orchestrator().run(cv_text, location)
            except InputValidationError as exc:
                st.error(f"{exc}. {exc.suggestion}")
            except Exception as exc:
                log.exception("Search failed from UI")
                st.error(f"Search failed: {exc}")

    result = st.session_state.get("search_result")
    if not result:
        st.info("No results yet.")
        return

    st.divider()
    c1, c2, c3 = st.columns(3)
    c1.metric("Jobs", result.summary.returned_jobs)
    c2.metric("Location", result.summary.search_location)
    c3.metric("Avg relevance", f"{result.summary.average_relevance_score}%")

    facts = result.facts
    if facts.skills:
        st.markdown("**Skills:** " + ", ".join(facts.skills[:12]))
    st.caption(f"Experience: {facts.experience_years} yrs · Education: {facts.education}")

    if not result.jobs:
        st.info("No matching jobs found. Try a broader location or a fuller CV.")
        return

    tab_table, tab_cards = st.tabs(["Ranking", "Details"])

    with tab_table:
        import pandas as pd

        df = pd.DataFrame([job.to_dict() for job in result.jobs])
        display_cols = ["relevanceScore", "title", "company", "location", "posted", "salary", "url"]
        st.dataframe(
            df[display_cols],
            use_container_width=True,
            column_config={
                "url": st.column_config.LinkColumn("Apply Link"),
                "relevanceScore": st.column_config.ProgressColumn(
                    "Score", min_value=0, max_value=100, format="%d%%"
                ),
            },
            hide_index=True,
        )

    with tab_cards:
        _job_cards(result.jobs)


def _job_cards(jobs) -> None:
    for job in jobs:
        with st.expander(f"{job.relevance_score}%  ·  {job.title} — {job.company}"):
            st.markdown(
                f'<div class="job-meta">{job.location} · {job.employment_type} · '
                f"{job.posted_at} · {job.salary}</div>",
                unsafe_allow_html=True,
            )
            st.write(job.description)
            if job.required_skills:
                st.caption("Skills: " + ", ".join(job.required_skills))
            if job.apply_url and job.apply_url != "#":
                st.link_button("Apply", job.apply_url)


# ── Page: CV Review ──────────────────────────────────────────────────────


def page_review() -> None:
    from cvmatch.review import CVReviewer

    st.header("CV Review")
    cv_text = _cv_input("review")

    if st.button("Review My CV", type="primary", use_container_width=True):
        if not cv_text.strip():
            st.warning("Add your CV first.")
            return
        with st.spinner("Reviewing your CV…"):
            try:
                st.session_state["review"] = (cv_text, CVReviewer(_model()).analyze(cv_text))
            except Exception as exc:
                st.error(f"Review failed: {exc}")

    stored = st.session_state.get("review")
    if not stored:
        return
    reviewed_cv, analysis = stored

    c1, c2 = st.columns(2)
    c1.metric("Grade", analysis.get("overallGrade", "–"))
    c2.metric("Score", analysis.get("score", "–"))
    st.write(analysis.get("summary", ""))

    selected: list[dict] = []
    for i, err in enumerate(analysis.get("errors", [])):
        icon = SEVERITY_ICONS.get(err.get("severity", ""), "⚪")
        label = f"{icon} {err.get('category', '')}: {err.get('issue', '')}"
        if st.checkbox(label, key=f"err_{i}", help=err.get("suggestion", "")):
            selected.append(err)

    if selected and st.button("Fix Selected Issues"):
        with st.spinner("Rewriting your CV…"):
            try:
                enhanced = CVReviewer(_model()).enhance(reviewed_cv, selected)
                st.text_area("Enhanced CV", enhanced, height=320)
            except Exception as exc:
                st.error(f"Enhancement failed: {exc}")


# ── Page: Interview Prep ─────────────────────────────────────────────────


def page_interview() -> None:
    from cvmatch.interview import InterviewQuestionGenerator

    st.header("Interview Prep")
    cv_text = _cv_input("interview")
    job_description = st.text_area("Job description (optional)", height=140)
    show_answers = st.checkbox("Show suggested answers", value=False)

    if st.button("Generate Questions", type="primary", use_container_width=True):
        if not cv_text.strip():
            st.warning("Add your CV first.")
            return
        with st.spinner("Preparing questions…"):
            try:
                gen = InterviewQuestionGenerator(_model())
                st.session_state["questions"] = gen.generate(cv_text, job_description or None)
            except Exception as exc:
                st.error(f"Question generation failed: {exc}")

    for q in st.session_state.get("questions", []):
        st.markdown(f"**{q.order}. {q.question}**")
        st.caption(f"{q.type} · {q.difficulty}")
        if show_answers:
            st.write(q.answer)


def _wrap(page):
    def run() -> None:
        st.markdown(_CSS, unsafe_allow_html=True)
        _sidebar_status()
        page()

    run.__name__ = page.__name__
    return run


pages = [
    st.Page(_wrap(page_search), title="Job Search", icon="🔎", url_path="search", default=True),
    st.Page(_wrap(page_review), title="CV Review", icon="📝", url_path="review"),
    st.Page(_wrap(page_interview), title="Interview Prep", icon="🎤", url_path="interview"),
]

nav = st.navigation(pages)
nav.run()
