from .job_description import parse_job_description
from .resume_text import parse_resume_text

__all__ = ["parse_job_description", "parse_resume_text"]
