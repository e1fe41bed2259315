"""Interview question generation from a CV and an optional job description."""
from __future__ import annotations

import json
import time
from typing import Any, Callable

from cvmatch.llm import TextModel
from cvmatch.log import get_logger
from cvmatch.models import InterviewQuestion
from cvmatch.retry import RetryPolicy, call_with_retry
from cvmatch.sanitize import extract_json_array

log = get_logger(__name__)

CV_ONLY = "cv_only"
CV_WITH_JOB = "cv_with_job"

_INTRO = """\
You are an expert HR interviewer. Analyze the provided CV and generate exactly
20 relevant, professional interview questions with HIGH-QUALITY, SPECIFIC answers.

CV:
{cv}

"""

_WITH_JOB = """\
Job Description:
{job_description}

Instructions: Generate questions that assess both the candidate's background
(from CV) and their fit for this specific role (from job description).
"""

_CV_ONLY = """\
Instructions: Generate questions based solely on the candidate's CV, focusing on
their experience, skills, and background.
"""

_RULES = """
Question Distribution:
- 4 General questions (background, motivation, career goals)
- 6 Technical questions (based on skills and technologies mentioned in CV)
- 4 Behavioral questions (using STAR method scenarios)
- 4 CV-specific questions (about specific experiences, projects, or achievements mentioned)
{last_group}

Answer requirements:
- Answer as the candidate, in the first person, with concrete examples.
- Technical answers give specific details and definitive comparisons.
- Behavioral answers follow the STAR method.
- No generic advice such as "The candidate should..." or "It's important to...".

Vary difficulty levels: 6 easy, 8 medium, 6 hard.

CRITICAL: Respond with ONLY a valid JSON array. No explanations, no markdown, no extra text.

Format:
[
  {{
    "question": "Question text here",
    "type": "general|technical|behavioral|cv_specific|job_specific",
    "difficulty": "easy|medium|hard",
    "answer": "Direct, specific answer as if the candidate is responding"
  }}
]
"""

_GENERIC_QUESTIONS: list[tuple[str, str, str, str]] = [
    ("Tell me about yourself and your professional background.", "general", "easy",
     "I have spent the last few years building products end to end, starting at a small team "
     "where I owned features from design to release and later moving to a larger organisation "
     "where I focused on reliability and collaboration across teams."),
    ("What are your greatest professional strengths?", "general", "easy",
     "Problem-solving under pressure. I break complex issues into smaller parts, research them "
     "properly and ship a fix quickly, for example tracing a production incident to a race "
     "condition in our transaction handling."),
    ("Describe a challenging project you worked on and how you overcame obstacles.", "behavioral", "medium",
     "I led a migration of a legacy system to a modern stack while the business kept running. "
     "A staged plan, feature flags and thorough testing let us finish two weeks early."),
    ("How do you stay updated with the latest trends and technologies in your field?", "general", "easy",
     "I follow a few industry newsletters, attend local meetups and try new tools in side "
     "projects before proposing them at work."),
    ("Tell me about a time when you had to work under pressure or tight deadlines.", "behavioral", "medium",
     "During a seasonal traffic spike I had a few hours to stabilise our platform. I added "
     "caching and tuned the slowest queries, and we handled the peak without downtime."),
    ("What technical skills do you consider your strongest, and how have you applied them?", "technical", "medium",
     "My strongest skills are the core tools listed on my CV. I used them to design a dashboard "
     "that processes live updates while staying responsive for users."),
    ("How do you approach problem-solving in your work?", "behavioral", "medium",
     "I reproduce the issue, gather data, narrow it down step by step and verify the fix with "
     "measurements, as I did when removing a memory leak that cut usage by 40%."),
    ("What motivates you in your professional career?", "general", "easy",
     "Building things that solve real problems for people and learning something new with "
     "every project."),
    ("Describe a situation where you had to learn a new technology or skill quickly.", "behavioral", "medium",
     "When my team adopted a new language I practised daily, converted a personal project and "
     "paired with an experienced colleague; within two weeks I was productive and helping others."),
    ("Where do you see yourself professionally in the next 3-5 years?", "general", "easy",
     "In a senior role where I mentor others and contribute to architectural decisions, with a "
     "deeper focus on system design."),
]


def session_type(job_description: str | None) -> str:
    return CV_WITH_JOB if job_description else CV_ONLY


def build_prompt(cv: str, job_description: str | None = None) -> str:
    prompt = _INTRO.format(cv=cv)
    if job_description:
        prompt += _WITH_JOB.format(job_description=job_description)
        last_group = "- 2 Job-specific questions (tailored to the job requirements and how CV aligns)"
    else:
        prompt += _CV_ONLY
        last_group = "- 2 Additional experience-based questions"
    return prompt + _RULES.format(last_group=last_group)


def generic_questions() -> list[InterviewQuestion]:
    return [
        InterviewQuestion(question=q, type=t, difficulty=d, answer=a, order=i)
        for i, (q, t, d, a) in enumerate(_GENERIC_QUESTIONS, start=1)
    ]


def _question_from(item: Any) -> InterviewQuestion | None:
    if not isinstance(item, dict):
        return None
    text = item.get("question") or item.get("question_text")
    if not isinstance(text, str) or not text.strip():
        return None
    return InterviewQuestion(
        question=text.strip(),
        type=item.get("type") or item.get("question_type") or "general",
        difficulty=item.get("difficulty") or item.get("difficulty_level") or "medium",
        answer=item.get("answer") or item.get("suggested_answer") or "Answer not provided",
        order=0,
    )


def parse_questions(text: str) -> list[InterviewQuestion]:
    """Decode the model's JSON array; fall back to the generic set."""
    try:
        items = json.loads(extract_json_array(text))
    except json.JSONDecodeError as exc:
        log.warning("Interview questions were not valid JSON (%s), using generic set", exc)
        return generic_questions()
    if not isinstance(items, list):
        log.warning("Interview questions were %s, not a list", type(items).__name__)
        return generic_questions()

    questions = [q for q in (_question_from(item) for item in items) if q is not None]
    if not questions:
        log.warning("No usable interview questions in model output, using generic set")
        return generic_questions()
    for i, q in enumerate(questions, start=1):
        q.order = i
    return questions


class InterviewQuestionGenerator:
    def __init__(
        self,
        model: TextModel,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.model = model
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or time.sleep

    def generate(self, cv: str, job_description: str | None = None) -> list[InterviewQuestion]:
        prompt = build_prompt(cv, job_description)
        raw = call_with_retry(
            lambda: self.model.generate(prompt),
            self.policy,
            sleep=self._sleep,
            label="interview-questions",
        )
        questions = parse_questions(raw)
        log.info("Generated %d interview questions (%s)", len(questions), session_type(job_description))
        return questions
