"""Job-specific domain helpers."""

import re

from slugify import slugify as _slugify


def slugify(title: str) -> str:
    """Lowercase, ASCII, hyphen-separated form of a job title."""
    return _slugify(title, separator="-", lowercase=True)


ALLOWED_RESUME_EXTENSIONS = (".pdf", ".docx")


def resume_filename(user_id: int, user_name: str, job_id: int, extension: str) -> str:
    """Stored name of an applicant's resume: ``{user}_{name}_{job}{ext}``."""
    safe_name = re.sub(r"[^\w-]+", "-", user_name).strip("-") or "applicant"
    return f"{user_id}_{safe_name}_{job_id}{extension}"
