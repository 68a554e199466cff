"""Plain-text resume -> ParsedResume.

Only the raw-text path lives here; PDF and DOCX extraction happen upstream.
Sections are found by short header lines ("Experience", "Technical Skills:").
Text before the first header is treated as the contact block.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date

from resume_engine.core.errors import EvaluationErrorCode, create_error
from resume_engine.schemas.resume import (
    CertificationEntry,
    CourseEntry,
    DocumentMetadata,
    EducationEntry,
    ExperienceEntry,
    ParsedResume,
    ParseQuality,
    PersonalInfo,
    ProjectEntry,
)
from resume_engine.taxonomy import contains_phrase
from resume_engine.taxonomy.rules import JOB_TITLE_KEYWORDS, SECTION_PATTERNS

logger = logging.getLogger(__name__)

MIN_RESUME_TEXT_CHARS = 50
WORDS_PER_PAGE = 500

_MAX_HEADER_CHARS = 40
_MAX_HEADER_WORDS = 4
_MIN_BULLET_CHARS = 10
_MIN_CONTINUATION_CHARS = 20

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)")
LINKEDIN_RE = re.compile(r"(?:linkedin\.com/in/|linkedin:?\s*)([A-Za-z0-9-]+)", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:github\.com/|github:?\s*)([A-Za-z0-9-]+)", re.IGNORECASE)
URL_RE = re.compile(r"https?://[^\s|,]+", re.IGNORECASE)
LOCATION_RE = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z]{2})\b")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
DATE_RE = re.compile(
    r"\b(?:(?P<month>jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?,?\s*)?(?P<year>(?:19|20)\d{2})\b"
    r"|\b(?P<num_month>\d{1,2})/(?P<num_year>(?:19|20)\d{2})\b"
    r"|\b(?P<current>present|current|now)\b",
    re.IGNORECASE,
)

BULLET_MARKERS = ("•", "-", "*", "▪", "◦", "·", "–")
_BULLET_PREFIX_RE = re.compile(r"^[•\-*▪◦·–]\s*")
_JOB_LINE_SPLIT_RE = re.compile(r"\s*[|@]\s*|\s+[-–—]\s+|,\s+|\s+at\s+", re.IGNORECASE)

DEGREE_RE = re.compile(
    r"(?<![A-Za-z])(?:Bachelor(?:'s)?|Master(?:'s)?|MBA|Ph\.?D\.?|Doctor(?:ate)?|Associate(?:'s)?"
    r"|B\.?S\.?c?|B\.?A\.?|B\.?Eng|M\.?S\.?c?|M\.?A\.?|M\.?Eng)(?![A-Za-z])"
)
# Outside an education section only unambiguous degree names count ("MA" is also a state).
_LONG_DEGREE_RE = re.compile(r"(?<![A-Za-z])(?:Bachelor|Master|MBA|Ph\.?D\.?|Doctorate)(?![A-Za-z])")
_DEGREE_PREFIX_RE = re.compile(DEGREE_RE.pattern + r"(?:\s+(?:of|in)\s+(?:Science|Arts|Engineering))?")
_FIELD_RE = re.compile(r"\b(?:in|of)\s+([A-Za-z&\s]+?)(?=\s*(?:,|\bfrom\b|\bat\b|\||[-–—]|\d|$))", re.IGNORECASE)
_GPA_RE = re.compile(r"GPA:?\s*(\d\.\d{1,2})", re.IGNORECASE)
_INSTITUTION_RE = re.compile(r"universit|college|institute|school|academy", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")

_SKILL_SPLIT_RE = re.compile(r"[,;|•\n]")
_SKILL_LABEL_RE = re.compile(r"^[A-Za-z &/]{2,30}:\s*")
_USING_RE = re.compile(r"\busing\s+([A-Z][A-Za-z+#.]+(?:\s*,\s*[A-Z][A-Za-z+#.]+)*)")
_TECH_LINE_RE = re.compile(r"^(?:tech(?:nologies)?|stack|tools|built\s+with)\s*:\s*(.+)$", re.IGNORECASE)

_CERTIFICATION_RES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:AWS|Google|Azure|Microsoft|Cisco|CompTIA|PMP|Scrum|CISSP|CEH|Oracle)\s+"
        r"(?:Certified|Certification|Professional|Associate|Solutions)[A-Za-z \-]*"
    ),
    re.compile(r"Certified\s+[A-Z][A-Za-z ]+?(?:Professional|Engineer|Developer|Administrator|Architect|Master)"),
)
CERTIFICATION_ISSUERS: dict[str, str] = {
    "AWS": "Amazon Web Services",
    "Google": "Google",
    "Azure": "Microsoft",
    "Microsoft": "Microsoft",
    "Cisco": "Cisco",
    "CompTIA": "CompTIA",
    "PMP": "PMI",
    "Scrum": "Scrum Alliance",
    "CISSP": "ISC2",
    "Oracle": "Oracle",
    "Kubernetes": "CNCF",
}

COURSE_PLATFORMS: tuple[str, ...] = (
    "Coursera", "Udemy", "edX", "LinkedIn Learning", "Udacity", "Pluralsight", "Khan Academy",
)
_COURSE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:" + "|".join(re.escape(platform) for platform in COURSE_PLATFORMS) + r")\s*[-–:]?\s*([A-Za-z][A-Za-z ]+)",
        re.IGNORECASE,
    ),
    re.compile(r"\bcompleted?\s+([A-Za-z][A-Za-z ]+?)\s+(?:course|program)\b", re.IGNORECASE),
)

_TABLE_RE = re.compile(r"\t.*\t|[│┌└┐┘├┤]")


@dataclass
class _Section:
    name: str
    lines: list[str] = field(default_factory=list)


def parse_resume_text(text: str, *, today: date | None = None) -> ParsedResume:
    """Structured resume from plain text.

    ``today`` pins the end of "Present" ranges; defaults to the current date.
    """
    content = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    if not content.strip():
        raise create_error(EvaluationErrorCode.NO_CONTENT)
    if len(content.strip()) < MIN_RESUME_TEXT_CHARS:
        raise create_error(
            EvaluationErrorCode.CONTENT_TOO_SHORT,
            {"extracted_length": len(content.strip()), "minimum_required": MIN_RESUME_TEXT_CHARS},
        )

    today = today or date.today()
    header_lines, sections = split_sections(content)

    experience_lines = _section_lines(sections, "experience")
    if experience_lines is None:
        experience_lines = [] if sections else content.split("\n")

    parsed = ParsedResume(
        personal=extract_personal_info(content, header_lines),
        experiences=extract_experiences(experience_lines, today=today),
        education=_education_for(sections, content),
        skills=extract_skills(_section_lines(sections, "skills") or [], content),
        projects=extract_projects(_section_lines(sections, "projects") or []),
        certifications=extract_certifications(_section_lines(sections, "certifications"), content),
        courses=extract_courses(content),
        metadata=calculate_metadata(content, bool(sections)),
    )
    logger.debug(
        "resume_text_parsed sections=%s experiences=%s skills=%s parse_quality=%s",
        [section.name for section in sections],
        len(parsed.experiences),
        len(parsed.skills),
        parsed.metadata.parse_quality,
    )
    return parsed


# -- sections -----------------------------------------------------------------


def section_for_header(line: str) -> str | None:
    """Section name when ``line`` reads as a header such as "Work Experience:"."""
    stripped = line.strip().rstrip(":").strip()
    if not stripped or len(stripped) > _MAX_HEADER_CHARS or len(stripped.split()) > _MAX_HEADER_WORDS:
        return None
    if stripped.startswith(BULLET_MARKERS):
        return None
    for section, patterns in SECTION_PATTERNS.items():
        if any(pattern.match(stripped) for pattern in patterns):
            return section
    return None


def split_sections(text: str) -> tuple[list[str], list[_Section]]:
    header: list[str] = []
    sections: list[_Section] = []
    for line in text.split("\n"):
        name = section_for_header(line)
        if name is not None:
            sections.append(_Section(name))
        elif sections:
            sections[-1].lines.append(line)
        else:
            header.append(line)
    return header, sections


def _section_lines(sections: list[_Section], name: str) -> list[str] | None:
    """Lines of every section called ``name``; None when there is none."""
    matching = [section for section in sections if section.name == name]
    if not matching:
        return None
    return [line for section in matching for line in section.lines]


def _is_bullet(line: str) -> bool:
    return line.startswith(BULLET_MARKERS)


def _strip_bullet(line: str) -> str:
    return _BULLET_PREFIX_RE.sub("", line).strip()


# -- personal -------------------------------------------------------------------


def extract_personal_info(text: str, header_lines: list[str]) -> PersonalInfo:
    header_text = "\n".join(header_lines) if header_lines else text[:500]

    email = EMAIL_RE.search(text)
    phone = PHONE_RE.search(text)
    linkedin = LINKEDIN_RE.search(text)
    github = GITHUB_RE.search(text)
    location = LOCATION_RE.search(header_text)

    portfolio = None
    for url in URL_RE.findall(header_text):
        lowered = url.lower()
        if "linkedin.com" not in lowered and "github.com" not in lowered:
            portfolio = url
            break

    return PersonalInfo(
        name=_guess_name(header_text),
        email=email.group(0) if email else None,
        phone=phone.group(0).strip() if phone else None,
        location=f"{location.group(1)}, {location.group(2)}" if location else None,
        linkedin=f"linkedin.com/in/{linkedin.group(1)}" if linkedin else None,
        github=f"github.com/{github.group(1)}" if github else None,
        portfolio=portfolio,
    )


def _guess_name(header_text: str) -> str | None:
    for raw in header_text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if EMAIL_RE.search(line) or PHONE_RE.search(line) or URL_RE.search(line):
            continue
        if len(line) < 50 and not re.search(r"\d{3,}", line):
            return line
    return None


# -- experience -----------------------------------------------------------------


def _has_date(line: str) -> bool:
    return DATE_RE.search(line) is not None


def _is_job_line(line: str) -> bool:
    # Sentences mentioning "senior engineers" are descriptions, not titles.
    if len(line) > 100 or line.endswith("."):
        return False
    lowered = line.lower()
    return any(contains_phrase(lowered, keyword) for keyword in JOB_TITLE_KEYWORDS)


def extract_experiences(lines: list[str], *, today: date | None = None) -> list[ExperienceEntry]:
    today = today or date.today()
    entries: list[dict] = []
    current: dict | None = None

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        if _is_bullet(line):
            bullet = _strip_bullet(line)
            if current is not None and len(bullet) > _MIN_BULLET_CHARS:
                current["bullets"].append(bullet)
            continue

        has_date = _has_date(line)
        if has_date and current is not None and not current["bullets"] and not current["start_date"]:
            # "Title, Company" followed by a line holding only the date range.
            title, company = _split_job_line(_strip_dates(line))
            current.update(_parse_dates(line, today))
            if company and not current["company"]:
                current["company"] = company
            elif title and not current["company"]:
                current["company"] = title
            continue

        if has_date or _is_job_line(line):
            title, company = _split_job_line(_strip_dates(line))
            current = {"title": title, "company": company, "bullets": [], "start_date": ""}
            if has_date:
                current.update(_parse_dates(line, today))
            entries.append(current)
        elif current is not None and len(line) > _MIN_CONTINUATION_CHARS:
            current["bullets"].append(line)

    return [
        ExperienceEntry(
            title=entry["title"] or "Unknown Role",
            company=entry["company"] or "Unknown Company",
            start_date=entry["start_date"],
            end_date=entry.get("end_date", ""),
            duration_months=entry.get("duration_months", 0),
            bullets=entry["bullets"],
            is_current=entry.get("is_current", False),
        )
        for entry in entries
    ]


def _strip_dates(line: str) -> str:
    cleaned = DATE_RE.sub(" ", line)
    cleaned = re.sub(r"\(\s*[-–—to\s]*\)", " ", cleaned)
    cleaned = re.sub(r"(?:\s*(?:[-–—]|\bto\b)\s*)+$", "", cleaned.strip(), flags=re.IGNORECASE)
    return re.sub(r"\s{2,}", " ", cleaned).strip(" |,-–—")


def _split_job_line(line: str) -> tuple[str, str]:
    parts = [part.strip() for part in _JOB_LINE_SPLIT_RE.split(line) if part and part.strip()]
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def _parse_dates(line: str, today: date) -> dict:
    matches = list(DATE_RE.finditer(line))
    start = _to_year_month(matches[0], today) if matches else None
    end_match = matches[1] if len(matches) > 1 else None
    is_current = bool(end_match and end_match.group("current")) or bool(
        matches and matches[0].group("current")
    )
    end = _to_year_month(end_match, today) if end_match else None

    months = 0
    if start and is_current:
        months = _months_between(start, (today.year, today.month))
    elif start and end:
        months = _months_between(start, end)

    return {
        "start_date": matches[0].group(0).strip() if matches else "",
        "end_date": "Present" if is_current else (end_match.group(0).strip() if end_match else ""),
        "duration_months": months,
        "is_current": is_current,
    }


def _to_year_month(match: re.Match[str], today: date) -> tuple[int, int] | None:
    if match.group("current"):
        return today.year, today.month
    if match.group("num_year"):
        month = int(match.group("num_month"))
        return int(match.group("num_year")), month if 1 <= month <= 12 else 1
    month_name = match.group("month")
    month = _MONTHS.get(month_name[:3].lower(), 1) if month_name else 1
    return int(match.group("year")), month


def _months_between(start: tuple[int, int], end: tuple[int, int]) -> int:
    months = (end[0] - start[0]) * 12 + (end[1] - start[1])
    return max(1, months)


# -- education ------------------------------------------------------------------


def _education_for(sections: list[_Section], content: str) -> list[EducationEntry]:
    lines = _section_lines(sections, "education")
    if lines:
        return extract_education(lines)
    return extract_education(content.split("\n"), degree_pattern=_LONG_DEGREE_RE)


def extract_education(lines: list[str], degree_pattern: re.Pattern[str] = DEGREE_RE) -> list[EducationEntry]:
    entries: list[dict] = []
    current: dict | None = None

    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if degree_pattern.search(line):
            current = _parse_education_line(line)
            entries.append(current)
        elif current is not None and not current["institution"] and len(line) > 5 and not _is_bullet(line):
            current["institution"] = line
            if current["graduation_year"] is None:
                year = _YEAR_RE.search(line)
                current["graduation_year"] = int(year.group(0)) if year else None

    return [EducationEntry(**entry) for entry in entries]


def _parse_education_line(line: str) -> dict:
    degree = _DEGREE_PREFIX_RE.search(line)
    year = _YEAR_RE.search(line)
    gpa = _GPA_RE.search(line)
    field_match = _FIELD_RE.search(line[degree.end():]) if degree else None

    institution = ""
    for part in re.split(r"\s*[|,–—]\s*|\s+-\s+|\s+at\s+|\s+from\s+", line):
        if _INSTITUTION_RE.search(part):
            institution = _YEAR_RE.sub("", part).strip(" ()")
            break

    return {
        "degree": degree.group(0).strip() if degree else "",
        "field": field_match.group(1).strip() if field_match else None,
        "institution": institution,
        "graduation_year": int(year.group(0)) if year else None,
        "gpa": float(gpa.group(1)) if gpa else None,
    }


# -- skills ---------------------------------------------------------------------


def extract_skills(section_lines: list[str], text: str) -> list[str]:
    raw_skills: list[str] = []
    for raw in section_lines:
        line = _SKILL_LABEL_RE.sub("", _strip_bullet(raw.strip()))
        raw_skills.extend(_SKILL_SPLIT_RE.split(line))

    for match in _USING_RE.finditer(text):
        raw_skills.extend(match.group(1).split(","))

    skills: list[str] = []
    seen: set[str] = set()
    for raw in raw_skills:
        skill = raw.strip().strip(".")
        if 1 < len(skill) < 50 and skill.lower() not in seen:
            seen.add(skill.lower())
            skills.append(skill)
    return skills


# -- projects -------------------------------------------------------------------


def extract_projects(lines: list[str]) -> list[ProjectEntry]:
    projects: list[dict] = []
    current: dict | None = None

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        tech = _TECH_LINE_RE.match(_strip_bullet(line))
        if tech and current is not None:
            current["technologies"].extend(
                item.strip() for item in tech.group(1).split(",") if item.strip()
            )
            continue

        if not _is_bullet(line) and len(line) < 60:
            link = URL_RE.search(line)
            year = _YEAR_RE.search(line)
            name = URL_RE.sub("", line).strip(" |-–—")
            name = _YEAR_RE.sub("", name).strip(" |-–—()")
            current = {
                "name": name or line,
                "description": [],
                "technologies": [],
                "year": int(year.group(0)) if year else None,
                "link": link.group(0) if link else None,
            }
            projects.append(current)
        elif current is not None:
            description = _strip_bullet(line)
            if len(description) > _MIN_BULLET_CHARS:
                current["description"].append(description)

    return [
        ProjectEntry(
            name=project["name"],
            description=" ".join(project["description"]).strip(),
            technologies=project["technologies"],
            year=project["year"],
            link=project["link"],
        )
        for project in projects
    ]


# -- certifications and courses -------------------------------------------------


def certification_issuer(name: str) -> str:
    for key, issuer in CERTIFICATION_ISSUERS.items():
        if key.lower() in name.lower():
            return issuer
    return "Unknown"


def extract_certifications(section_lines: list[str] | None, text: str) -> list[CertificationEntry]:
    certifications: list[CertificationEntry] = []
    seen: set[str] = set()

    def add(name: str, source: str) -> None:
        cleaned = re.sub(r"\s{2,}", " ", name).strip(" -–—|,")
        if len(cleaned) <= 3 or cleaned.lower() in seen:
            return
        seen.add(cleaned.lower())
        year = _YEAR_RE.search(source)
        certifications.append(
            CertificationEntry(
                name=cleaned,
                issuer=certification_issuer(cleaned),
                year=int(year.group(0)) if year else None,
            )
        )

    if section_lines is not None:
        # Inside a certifications section every line is one credential.
        for raw in section_lines:
            line = _strip_bullet(raw.strip())
            if line:
                add(re.sub(r"\(?\b(?:19|20)\d{2}\b\)?", "", line), line)
        return certifications

    for pattern in _CERTIFICATION_RES:
        for match in pattern.finditer(text):
            add(match.group(0), match.group(0))
    return certifications


def course_platform(text: str) -> str:
    lowered = text.lower()
    for platform in COURSE_PLATFORMS:
        if platform.lower() in lowered:
            return platform
    return "Unknown"


def extract_courses(text: str) -> list[CourseEntry]:
    courses: list[CourseEntry] = []
    seen: set[str] = set()
    for pattern in _COURSE_RES:
        for match in pattern.finditer(text):
            name = match.group(1).strip()
            if len(name) > 5 and name.lower() not in seen:
                seen.add(name.lower())
                courses.append(CourseEntry(name=name, institution=course_platform(match.group(0))))
    return courses


# -- metadata -------------------------------------------------------------------


def calculate_metadata(text: str, has_sections: bool) -> DocumentMetadata:
    word_count = len(text.split())
    return DocumentMetadata(
        page_count=max(1, math.ceil(word_count / WORDS_PER_PAGE)),
        word_count=word_count,
        has_tables=_TABLE_RE.search(text) is not None,
        has_images=False,
        format="txt",
        parse_quality=assess_parse_quality(text, word_count, has_sections),
    )


def assess_parse_quality(text: str, word_count: int, has_sections: bool) -> ParseQuality:
    indicators = (
        EMAIL_RE.search(text) is not None,
        PHONE_RE.search(text) is not None,
        re.search(r"^\s*[•\-*▪]\s", text, re.MULTILINE) is not None,
        word_count >= 200,
        has_sections,
    )
    hits = sum(1 for indicator in indicators if indicator)
    if hits >= 4:
        return "high"
    if hits >= 2:
        return "medium"
    return "low"
