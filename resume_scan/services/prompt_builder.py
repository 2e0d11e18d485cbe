"""Prompt assembly for résumé/job matching."""

from __future__ import annotations

from resume_scan.core.errors import ValidationAppError

DEFAULT_MAX_RESUME_CHARS = 25000

TRUNCATION_MARKER = "... (truncated)"

PROMPT_TEMPLATE = """
Act as an expert ATS (applicant tracking system). Compare the RESUME TEXT to the JOB DESCRIPTION.

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_description}

OUTPUT JSON ONLY, a single object with exactly these three fields:
{{"score": <integer 0-100>, "missingKeywords": ["skill1", "skill2"], "advice": "short summary"}}

- score: how well the resume matches the job, 0 = no match, 100 = perfect match
- missingKeywords: skills or keywords required by the job that the resume lacks, most important first (empty list if none)
- advice: two or three sentences on how to improve the resume for this job

Do not use markdown. Do not wrap the JSON in code fences. Do not add any text before or after the JSON.
""".strip()


def build_prompt(
    resume_text: str,
    job_description: str,
    *,
    max_resume_chars: int = DEFAULT_MAX_RESUME_CHARS,
) -> str:
    """Build the matching instruction sent to the model.

    Only the first ``max_resume_chars`` characters of the résumé are embedded;
    the job description is embedded verbatim regardless of length.

    Args:
        resume_text: Text extracted from the résumé.
        job_description: Job description supplied by the caller.
        max_resume_chars: Résumé character budget.

    Returns:
        Prompt string. Same inputs always give the same prompt.

    Raises:
        ValidationAppError: If either input is missing or blank.
    """
    if not resume_text or not resume_text.strip():
        raise ValidationAppError(
            code="missing_resume_text",
            message="Resume text is required.",
            details={"field": "resume"},
        )
    if not job_description or not job_description.strip():
        raise ValidationAppError(
            code="missing_job_description",
            message="Job description is required.",
            details={"field": "jobDescription"},
        )

    resume_excerpt = resume_text[:max_resume_chars]
    if len(resume_text) > max_resume_chars:
        resume_excerpt += TRUNCATION_MARKER

    return PROMPT_TEMPLATE.format(
        resume_text=resume_excerpt,
        job_description=job_description,
    )
