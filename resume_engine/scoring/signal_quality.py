"""Signal quality: how clearly the resume presents itself to readers and ATS parsers.

Four sub-scores are summed: structure (30), writing quality (30),
formatting / ATS compatibility (25) and completeness (15).
"""

from __future__ import annotations

import re

from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.utils import clamp_score, ladder, measured_word_count, resume_to_text, round_half_up
from resume_engine.schemas.evaluation import DimensionScore
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy.rules import (
    BUZZWORDS,
    ESSENTIAL_SECTIONS,
    FILLER_WORDS,
    SECTION_PATTERNS,
    STANDARD_SECTION_ORDER,
)

_STRUCTURE_MAX = 30
_WRITING_MAX = 30
_FORMATTING_MAX = 25
_COMPLETENESS_MAX = 15

_HEADER_MAX_LENGTH = 30
_HEADER_LADDER = ((3, 5), (2, 3))
_BULLET_LENGTH_LADDER = ((0.7, 10), (0.5, 7), (0.3, 5))

# (pattern, issue, penalty); a penalty applies when a pattern matches more than 5 times.
_FORMATTING_ARTIFACTS: tuple[tuple[re.Pattern[str], str, int], ...] = (
    (re.compile(r"\t{2,}"), "excessive_tabs", 3),
    (re.compile(r"[│┌└├┐┘┤┬┴┼]"), "special_characters", 5),
    (re.compile(r"[^\x00-\x7F]"), "non_ascii_characters", 2),
    (re.compile(r"^\s{10,}", re.MULTILINE), "excessive_indentation", 2),
)
_ARTIFACT_TOLERANCE = 5

_FILLER_PATTERNS = tuple(re.compile(rf"\b{word}\b", re.IGNORECASE) for word in FILLER_WORDS)
_PUNCTUATION_RE = re.compile(r"[,;:.]")


def calculate_signal_quality_score(parsed: ParsedResume, raw_text: str | None = None) -> DimensionScore:
    text = raw_text if raw_text else resume_to_text(parsed)
    issues: list[str] = []

    structure = _structure_score(text, issues)
    writing = _writing_quality_score(parsed, issues)
    formatting = _formatting_score(parsed, text, measured_word_count(parsed, raw_text), issues)
    completeness = _completeness_score(parsed, issues)

    return DimensionScore(
        score=clamp_score(structure + writing + formatting + completeness),
        breakdown={
            "structure": structure,
            "writing_quality": writing,
            "formatting": formatting,
            "completeness": completeness,
        },
        issues=issues,
    )


# -- structure ---------------------------------------------------------------


def _is_header_line(line: str) -> bool:
    stripped = line.strip()
    if not stripped or len(stripped) >= _HEADER_MAX_LENGTH or not stripped[0].isupper():
        return False
    return any(pattern.search(stripped) for patterns in SECTION_PATTERNS.values() for pattern in patterns)


def _section_position(text: str, lines: list[str], patterns: tuple[re.Pattern[str], ...]) -> int | None:
    offset = 0
    for line in lines:
        if _is_header_line(line) and any(pattern.search(line) for pattern in patterns):
            return offset
        offset += len(line) + 1

    positions = [match.start() for match in (pattern.search(text) for pattern in patterns) if match]
    return min(positions) if positions else None


def detect_sections(text: str) -> list[str]:
    """Sections present in ``text``, ordered by where each first appears.

    A labelled header line wins over a passing mention further up the page.
    """
    lines = text.split("\n")
    found: list[tuple[int, str]] = []
    for section, patterns in SECTION_PATTERNS.items():
        position = _section_position(text, lines, patterns)
        if position is not None:
            found.append((position, section))
    return [section for _, section in sorted(found)]


def _section_order_score(sections: list[str]) -> tuple[int, bool]:
    if len(sections) < 2:
        return 5, True

    correct = 0
    pairs = 0
    for current, following in zip(sections, sections[1:]):
        if current in STANDARD_SECTION_ORDER and following in STANDARD_SECTION_ORDER:
            pairs += 1
            if STANDARD_SECTION_ORDER.index(current) < STANDARD_SECTION_ORDER.index(following):
                correct += 1

    ratio = correct / pairs if pairs else 1.0
    return round_half_up(ratio * 10), ratio >= 0.7


def _structure_score(text: str, issues: list[str]) -> int:
    sections = detect_sections(text)
    essential_ratio = sum(1 for section in ESSENTIAL_SECTIONS if section in sections) / len(ESSENTIAL_SECTIONS)

    if essential_ratio >= 1:
        score = 15
    elif essential_ratio >= 0.66:
        score = 10
        issues.append("missing_essential_sections")
    else:
        score = 5
        issues.append("many_missing_sections")

    order_points, well_ordered = _section_order_score(sections)
    score += order_points
    if not well_ordered:
        issues.append("poor_section_order")

    headers = sum(1 for line in text.split("\n") if _is_header_line(line))
    header_points = ladder(headers, _HEADER_LADDER, 1)
    if header_points == 1:
        issues.append("unclear_section_headers")
    score += header_points

    return min(_STRUCTURE_MAX, score)


# -- writing quality ---------------------------------------------------------


def _writing_quality_score(parsed: ParsedResume, issues: list[str]) -> int:
    bullets = parsed.all_bullets()
    if not bullets:
        issues.append("no_bullet_points")
        return 10

    score = _bullet_length_score(bullets, issues)
    score += _consistency_score(bullets, issues)
    score += _clarity_score(bullets, issues)
    return min(_WRITING_MAX, score)


def _bullet_length_score(bullets: list[str], issues: list[str]) -> int:
    low = int(get_scoring_value("content.optimal_bullet_length.min", 8))
    high = int(get_scoring_value("content.optimal_bullet_length.max", 25))
    lengths = [len(bullet.split()) for bullet in bullets]

    optimal_ratio = sum(1 for length in lengths if low <= length <= high) / len(lengths)
    if optimal_ratio < 0.5:
        if sum(1 for length in lengths if length < low) > len(lengths) * 0.3:
            issues.append("bullets_too_short")
        if sum(1 for length in lengths if length > high) > len(lengths) * 0.3:
            issues.append("bullets_too_long")
    return ladder(optimal_ratio, _BULLET_LENGTH_LADDER, 3)


def _consistency_score(bullets: list[str], issues: list[str]) -> int:
    score = 10
    total = len(bullets)

    capital_ratio = sum(1 for bullet in bullets if bullet.strip()[:1].isupper()) / total
    if capital_ratio not in (0, 1):
        score -= 3
        if capital_ratio < 0.5 or capital_ratio > 0.8:
            issues.append("inconsistent_capitalization")

    period_ratio = sum(1 for bullet in bullets if bullet.rstrip().endswith(".")) / total
    if 0.2 < period_ratio < 0.8:
        score -= 2
        issues.append("inconsistent_punctuation")

    present_tense = 0
    for bullet in bullets:
        words = bullet.split()
        if words and not words[0].endswith("ed") and not words[0].endswith("ing"):
            present_tense += 1
    tense_ratio = present_tense / total
    if 0.3 < tense_ratio < 0.7:
        score -= 2
        issues.append("inconsistent_tense")

    return max(0, score)


def _clarity_score(bullets: list[str], issues: list[str]) -> int:
    score = 10

    fillers = sum(len(pattern.findall(bullet)) for bullet in bullets for pattern in _FILLER_PATTERNS)
    if fillers > len(bullets) * 0.5:
        score -= 3
        issues.append("too_many_filler_words")

    buzzwords = sum(1 for bullet in bullets for word in BUZZWORDS if word in bullet.lower())
    if buzzwords > 5:
        score -= 2
        issues.append("buzzword_overload")

    run_on = sum(
        1 for bullet in bullets if len(bullet.split()) > 30 and len(_PUNCTUATION_RE.findall(bullet)) < 2
    )
    if run_on > 2:
        score -= 2
        issues.append("run_on_sentences")

    return max(0, score)


# -- formatting / ATS --------------------------------------------------------


def _formatting_score(parsed: ParsedResume, text: str, word_count: int | None, issues: list[str]) -> int:
    score = _FORMATTING_MAX

    for pattern, issue, penalty in _FORMATTING_ARTIFACTS:
        if len(pattern.findall(text)) > _ARTIFACT_TOLERANCE:
            score -= penalty
            issues.append(issue)

    metadata = parsed.metadata
    if metadata.parse_quality == "low":
        score -= 10
        issues.append("poor_formatting")
    elif metadata.parse_quality == "medium":
        score -= 5

    if metadata.has_tables:
        score -= 3
        issues.append("tables_detected")

    if word_count is None:
        return max(0, score)

    low = int(get_scoring_value("content.optimal_word_count.min", 300))
    high = int(get_scoring_value("content.optimal_word_count.max", 800))
    if word_count < low:
        score -= 5
        issues.append("resume_too_short")
    elif word_count > high:
        score -= 3
        issues.append("resume_too_long")

    return max(0, score)


# -- completeness ------------------------------------------------------------


def _completeness_score(parsed: ParsedResume, issues: list[str]) -> int:
    personal = parsed.personal
    contact_fields = sum(1 for value in (personal.email, personal.phone, personal.location, personal.linkedin) if value)
    if contact_fields >= 3:
        score = 5
    elif contact_fields >= 2:
        score = 3
    else:
        score = 1
        issues.append("incomplete_contact_info")

    experiences = parsed.experiences
    if not experiences:
        issues.append("no_experience")
    elif all(len(entry.bullets) >= 2 and entry.title and entry.company for entry in experiences):
        score += 5
    elif any(len(entry.bullets) >= 2 for entry in experiences):
        score += 3
    else:
        score += 1
        issues.append("sparse_experience_details")

    if parsed.education:
        score += 3 if any(entry.degree and entry.institution for entry in parsed.education) else 2
    else:
        issues.append("no_education")

    if parsed.skills:
        score += 2
    else:
        issues.append("no_skills_section")

    return min(_COMPLETENESS_MAX, score)
