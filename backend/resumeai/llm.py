# backend/resumeai/llm.py
import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel
from google import genai
from google.genai import types

from .editing import set_summary
from .resume_schema import Resume

logger = logging.getLogger(__name__)

DEFAULT_JOB_TITLE = "Professional"
DEFAULT_COMPANY = "Industry"
DEFAULT_SKILLS = "General Professional Skills"
YEARS_PER_ENTRY = 2


class SummaryGenerationError(RuntimeError):
    """Any provider, transport or response failure while generating a summary."""


class SummaryInProgressError(RuntimeError):
    pass


class SummaryRequest(BaseModel):
    job_title: str
    company: str
    skills: str
    years_of_experience: int


def build_summary_request(resume: Resume) -> SummaryRequest:
    """
    Derive the prompt inputs from the document.
    Years of experience is a rough estimate (2 per experience entry),
    not computed from the actual date ranges.
    """
    if resume.experience:
        latest = resume.experience[0]
        job_title, company = latest.job_title, latest.company
    else:
        job_title, company = DEFAULT_JOB_TITLE, DEFAULT_COMPANY

    skills = ", ".join(skill.name for skill in resume.skills)

    return SummaryRequest(
        job_title=job_title,
        company=company,
        skills=skills or DEFAULT_SKILLS,
        years_of_experience=len(resume.experience) * YEARS_PER_ENTRY,
    )


def _build_summary_prompt(req: SummaryRequest) -> str:
    return f"""
You are an expert resume writer. Write a professional, punchy, and ATS-friendly professional summary (approx 50-80 words) for a resume.

Candidate Details:
- Most Recent Role: {req.job_title} at {req.company}
- Key Skills: {req.skills}
- Years of Experience: {req.years_of_experience} (estimated)

The summary should highlight leadership, problem-solving, and technical expertise relevant to their background. Do not use placeholders. Write in the first person but without pronouns (e.g., "Experienced software engineer..." instead of "I am an experienced...").
""".strip()


def _client() -> genai.Client:
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise RuntimeError("Missing GEMINI_API_KEY in environment (.env).")
    return genai.Client(api_key=api_key)


async def generate_resume_summary(resume: Resume, client: Optional[Any] = None) -> str:
    """
    Input: Resume snapshot
    Output: generated professional summary text

    Every failure (configuration, transport, provider, empty response)
    surfaces as SummaryGenerationError.
    """
    model = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
    prompt = _build_summary_prompt(build_summary_request(resume))

    try:
        client = client or _client()
        resp = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=0.7,
                max_output_tokens=4096,
            ),
        )
        text = (resp.text or "").strip()
    except Exception as exc:
        logger.exception("Gemini summary generation failed")
        raise SummaryGenerationError(
            "Failed to generate summary. Please check your API configuration."
        ) from exc

    if not text:
        logger.error("Gemini returned an empty summary")
        raise SummaryGenerationError("Failed to generate summary: empty response.")
    return text


class SummaryGenerator:
    """
    Single-flight wrapper around summary generation: while one request is
    outstanding, further calls fail fast with SummaryInProgressError.
    """

    def __init__(self, generate: Callable[[Resume], Awaitable[str]] = generate_resume_summary):
        self._generate = generate
        self._lock = asyncio.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def generate(self, resume: Resume) -> str:
        if self._lock.locked():
            raise SummaryInProgressError("A summary is already being generated.")
        async with self._lock:
            logger.info("Generating summary")
            return await self._generate(resume)

    async def apply(
        self,
        load: Callable[[], Resume],
        store: Callable[[Resume], None],
    ) -> Resume:
        """
        Generate from the current snapshot and write the summary into the
        snapshot that is current once the call completes. On failure nothing
        is stored.
        """
        summary = await self.generate(load())
        updated = set_summary(load(), summary)
        store(updated)
        return updated
