from __future__ import annotations

import math

from resume_engine.schemas.resume import ParsedResume


def round_half_up(value: float) -> int:
    """Round .5 upwards, matching how scores are reported elsewhere in the product."""
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    return int(clamp(round_half_up(value)))


def ladder(value: float, steps: tuple[tuple[float, int], ...], default: int) -> int:
    """First score whose threshold ``value`` reaches; ``steps`` are ordered high to low."""
    for threshold, score in steps:
        if value >= threshold:
            return score
    return default


def resume_to_text(parsed: ParsedResume) -> str:
    """Plain-text rendering of a structured resume, used when no raw text is available.

    Each populated section is introduced by its standard header, in conventional
    reading order, so section detection sees the layout the fields describe.
    """
    lines: list[str] = []
    if parsed.personal.name:
        lines.append(parsed.personal.name)
    if parsed.experiences:
        lines.append("Experience")
        for experience in parsed.experiences:
            lines.append(f"{experience.title} at {experience.company}")
            lines.extend(experience.bullets)
    if parsed.skills:
        lines.append("Skills")
        lines.append(", ".join(parsed.skills))
    if parsed.education:
        lines.append("Education")
        for education in parsed.education:
            degree = f"{education.degree} in {education.field}" if education.field else education.degree
            lines.append(f"{degree} from {education.institution}")
    if parsed.projects:
        lines.append("Projects")
        lines.extend(f"{project.name}: {project.description}" for project in parsed.projects)
    if parsed.certifications:
        lines.append("Certifications")
        lines.extend(certification.name for certification in parsed.certifications)
    return "\n".join(lines)


def measured_word_count(parsed: ParsedResume, raw_text: str | None = None) -> int | None:
    """Word count from the document metadata, else from the raw text; None when neither is known."""
    if parsed.metadata.word_count is not None:
        return parsed.metadata.word_count
    if raw_text:
        return len(raw_text.split())
    return None
