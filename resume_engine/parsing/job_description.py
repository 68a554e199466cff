"""Plain-text job description -> ParsedJobRequirements.

The text is cut into blocks at header lines ("Requirements:", "Nice to have",
"Benefits", ...). Skills and tools found in requirement blocks are required,
those in preferred blocks are preferred. Without a requirements header the
first 60% of the detected items (by first mention) are treated as required.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from resume_engine.analysis.gap_detection import extract_experience_types
from resume_engine.core.errors import EvaluationErrorCode, create_error
from resume_engine.extraction import infer_seniority_from_title
from resume_engine.schemas.job import ParsedJobRequirements, SeniorityLevel
from resume_engine.taxonomy import LocalTaxonomy, contains_phrase, get_default_taxonomy

logger = logging.getLogger(__name__)

MIN_JOB_DESCRIPTION_CHARS = 50

_REQUIRED_SPLIT = 0.6
_MAX_DOMAIN_KEYWORDS = 10
_MAX_KEYWORDS_PER_INDUSTRY = 3
_MAX_TITLE_CHARS = 80

# Checked in this order, so "Preferred Qualifications" is preferred, not required.
_HEADER_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (kind, re.compile(rf"^(?:{body})\b\s*(?P<colon>:)?\s*(?P<rest>.*)$", re.IGNORECASE))
    for kind, body in (
        ("preferred", r"preferred(?:\s+(?:qualifications|skills|experience))?|nice[\s-]to[\s-]haves?|bonus(?:\s+points)?|pluses"),
        (
            "required",
            r"(?:minimum\s+|basic\s+)?requirements?|required(?:\s+(?:qualifications|skills|experience))?"
            r"|must[\s-]haves?|(?:minimum\s+|basic\s+)?qualifications|what\s+you(?:'ll|\s+will)?\s+(?:need|bring)",
        ),
        (
            "other",
            r"about(?:\s+(?:us|the\s+(?:role|team|company)))?|benefits|perks|what\s+we\s+offer"
            r"|responsibilities|what\s+you(?:'ll|\s+will)\s+do|who\s+we\s+are|compensation",
        ),
    )
)

_SKILL_PHRASE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"experience\s+(?:with|in)\s+([A-Za-z+#.]+)",
        r"proficient\s+(?:in|with)\s+([A-Za-z+#.]+)",
        r"knowledge\s+of\s+([A-Za-z+#.]+)",
        r"familiarity\s+with\s+([A-Za-z+#.]+)",
    )
)

_DOMAIN_PHRASE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:experience\s+in|knowledge\s+of)\s+(?:the\s+)?([a-z]+(?:\s+[a-z]+)?)\s+(?:industry|sector|domain)",
        re.IGNORECASE,
    ),
    re.compile(r"background\s+in\s+([a-z]+(?:\s+[a-z]+)?)", re.IGNORECASE),
)

_YEARS_RANGE_RE = re.compile(r"(\d+)\s*(?:-|–|—|to)\s*(\d+)\s*\+?\s*(?:years?|yrs?)", re.IGNORECASE)
_YEARS_MIN_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"(\d+)\+?\s*(?:years?|yrs?)(?:\s+of)?\s+(?:experience|exp)",
        r"minimum\s+(?:of\s+)?(\d+)\s*(?:years?|yrs?)",
        r"at\s+least\s+(\d+)\s*(?:years?|yrs?)",
    )
)

_YEARS_TO_LEVEL: tuple[tuple[int, SeniorityLevel], ...] = ((8, "lead"), (5, "senior"), (2, "mid"))


@dataclass
class _Blocks:
    intro: list[str] = field(default_factory=list)
    required: list[str] = field(default_factory=list)
    preferred: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    @property
    def has_required(self) -> bool:
        return bool(self.required)

    def text(self, kind: str) -> str:
        return "\n".join(getattr(self, kind))


def parse_job_description(text: str, taxonomy: LocalTaxonomy | None = None) -> ParsedJobRequirements:
    raw = (text or "").strip()
    if len(raw) < MIN_JOB_DESCRIPTION_CHARS:
        raise create_error(
            EvaluationErrorCode.JOB_PARSING_FAILED,
            {"length": len(raw), "minimum": MIN_JOB_DESCRIPTION_CHARS},
        )

    taxonomy = taxonomy or get_default_taxonomy()
    blocks = split_blocks(raw)

    required_skills, preferred_skills = _split_required_preferred(
        blocks, lambda chunk: _extract_skills(chunk, taxonomy)
    )
    required_tools, preferred_tools = _split_required_preferred(blocks, taxonomy.detect_tools_in_order)
    years_min, years_max = extract_years_experience(raw)
    experience_source = blocks.text("required") if blocks.has_required else raw

    requirements = ParsedJobRequirements(
        required_skills=required_skills,
        preferred_skills=preferred_skills,
        required_tools=required_tools,
        preferred_tools=preferred_tools,
        seniority_expected=extract_seniority(raw, years_min),
        domain_keywords=extract_domain_keywords(raw, taxonomy),
        required_experience_types=extract_experience_types(experience_source.split("\n")),
        years_experience_min=years_min,
        years_experience_max=years_max,
    )
    logger.debug(
        "job_description_parsed required_skills=%s required_tools=%s seniority=%s years_min=%s",
        len(requirements.required_skills),
        len(requirements.required_tools),
        requirements.seniority_expected,
        requirements.years_experience_min,
    )
    return requirements


def split_blocks(text: str) -> _Blocks:
    blocks = _Blocks()
    current = blocks.intro
    for line in text.split("\n"):
        stripped = line.strip().lstrip("#").strip()
        if not stripped:
            continue
        header = _match_header(stripped)
        if header is None:
            current.append(stripped)
            continue
        kind, rest = header
        current = getattr(blocks, kind)
        if rest:
            current.append(rest)
    return blocks


def _match_header(line: str) -> tuple[str, str] | None:
    for kind, pattern in _HEADER_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        rest = match.group("rest").strip()
        # "Required skills include Go" is prose, "Required: Go" is a header.
        if rest and not match.group("colon"):
            continue
        return kind, rest
    return None


def _split_required_preferred(
    blocks: _Blocks, detect: Callable[[str], list[str]]
) -> tuple[list[str], list[str]]:
    if not blocks.has_required:
        found = detect("\n".join([*blocks.intro, *blocks.preferred, *blocks.other]))
        cut = math.ceil(len(found) * _REQUIRED_SPLIT)
        return found[:cut], found[cut:]

    required = detect(blocks.text("required"))
    preferred: list[str] = []
    for chunk in (blocks.text("preferred"), "\n".join([*blocks.intro, *blocks.other])):
        for item in detect(chunk):
            if item not in required and item not in preferred:
                preferred.append(item)
    return required, preferred


def _extract_skills(text: str, taxonomy: LocalTaxonomy) -> list[str]:
    skills = taxonomy.detect_skills_in_order(text)
    # Short or ambiguous names ("Go", "C") are only trusted after an explicit lead-in.
    for pattern in _SKILL_PHRASE_PATTERNS:
        for match in pattern.finditer(text):
            candidate = match.group(1).strip().rstrip(".")
            if not taxonomy.is_known_skill(candidate):
                continue
            skill = taxonomy.normalize_skill(candidate)
            if skill not in skills:
                skills.append(skill)
    return skills


def extract_seniority(text: str, years_min: float | None = None) -> SeniorityLevel:
    """Seniority from the title line, then from the years asked for; mid otherwise."""
    title = _title_line(text)
    if title:
        level = infer_seniority_from_title(title)
        if level != "mid":
            return level

    if years_min is not None:
        for min_years, level in _YEARS_TO_LEVEL:
            if years_min >= min_years:
                return level
        return "entry"
    return "mid"


def _title_line(text: str) -> str | None:
    for line in text.split("\n"):
        stripped = line.strip().lstrip("#").strip()
        if not stripped:
            continue
        if len(stripped) > _MAX_TITLE_CHARS or _match_header(stripped) is not None:
            return None
        return stripped
    return None


def extract_domain_keywords(text: str, taxonomy: LocalTaxonomy | None = None) -> list[str]:
    taxonomy = taxonomy or get_default_taxonomy()
    keywords: list[str] = []

    for industry_keywords in taxonomy.industry_keywords.values():
        taken = 0
        for keyword in industry_keywords:
            if taken >= _MAX_KEYWORDS_PER_INDUSTRY:
                break
            if contains_phrase(text, keyword):
                taken += 1
                if keyword not in keywords:
                    keywords.append(keyword)

    for pattern in _DOMAIN_PHRASE_PATTERNS:
        for match in pattern.finditer(text):
            phrase = match.group(1).strip().lower()
            if len(phrase) > 3 and phrase not in keywords:
                keywords.append(phrase)

    return keywords[:_MAX_DOMAIN_KEYWORDS]


def extract_years_experience(text: str) -> tuple[float | None, float | None]:
    """(min, max) years asked for; a range wins over a bare minimum."""
    match = _YEARS_RANGE_RE.search(text)
    if match:
        low, high = float(match.group(1)), float(match.group(2))
        if high >= low:
            return low, high
    for pattern in _YEARS_MIN_PATTERNS:
        match = pattern.search(text)
        if match:
            return float(match.group(1)), None
    return None, None
