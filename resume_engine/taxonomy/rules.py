"""Rule tables shared by the extractor, the scorers and the parsers."""

from __future__ import annotations

import re

METRIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d+%"),
    re.compile(r"\$[\d,]+[KMB]?", re.IGNORECASE),
    re.compile(r"[\d,]+\s*(users|customers|clients|members|subscribers)", re.IGNORECASE),
    re.compile(r"[\d,]+\s*(sales|leads|orders|transactions)", re.IGNORECASE),
    re.compile(r"[\d,]+\s*(applications|requests|tickets)", re.IGNORECASE),
    re.compile(r"[\d,]+\s*(views|impressions|clicks|visits)", re.IGNORECASE),
    re.compile(r"\d+\s*(hours?|days?|weeks?|months?|years?)", re.IGNORECASE),
    re.compile(r"\d+x\s*(faster|improvement|increase|growth)", re.IGNORECASE),
    re.compile(r"increased?\s*by\s*\d+", re.IGNORECASE),
    re.compile(r"reduced?\s*by\s*\d+", re.IGNORECASE),
    re.compile(r"improved?\s*by\s*\d+", re.IGNORECASE),
    re.compile(r"saved?\s*\$?[\d,]+", re.IGNORECASE),
    re.compile(r"cut\s*\d+", re.IGNORECASE),
    re.compile(r"team\s*of\s*\d+", re.IGNORECASE),
    re.compile(r"\d+\s*(team members|engineers|developers|people)", re.IGNORECASE),
    re.compile(r"\d+\s*(projects?|initiatives?|campaigns?)", re.IGNORECASE),
    re.compile(r"\$[\d,]+\s*(revenue|savings?|budget|funding)", re.IGNORECASE),
    re.compile(r"[\d,]+\s*(million|billion|thousand)", re.IGNORECASE),
)

# Narrower pattern used for the résumé-level "missing metrics" gap.
GAP_METRIC_RE = re.compile(r"\d+%|\$[\d,]+|[\d,]+\s*(users|customers|sales|increase|decrease)", re.IGNORECASE)

STRONG_ACTION_VERBS: tuple[str, ...] = (
    # leadership
    "led", "directed", "managed", "headed", "orchestrated", "spearheaded", "championed", "pioneered",
    # achievement
    "achieved", "exceeded", "delivered", "accomplished", "attained", "surpassed",
    # creation
    "created", "built", "designed", "developed", "established", "founded", "launched", "initiated",
    # improvement
    "optimized", "improved", "enhanced", "streamlined", "accelerated", "transformed", "revamped", "modernized",
    # technical
    "engineered", "architected", "implemented", "automated", "integrated", "deployed", "scaled",
    # impact
    "drove", "increased", "reduced", "generated", "saved", "expanded", "boosted",
    # collaboration
    "collaborated", "partnered", "mentored", "coached", "trained",
)

WEAK_ACTION_VERBS: tuple[str, ...] = (
    "worked", "helped", "assisted", "participated", "involved", "responsible", "handled",
    "did", "made", "got", "put", "used", "tried", "contributed", "supported",
    "was part of", "tasked with", "in charge of",
)

GENERIC_PHRASES: tuple[str, ...] = (
    "responsible for", "duties included", "worked on", "helped with", "assisted with",
    "participated in", "involved in", "tasked with", "in charge of",
)

# Execution-impact scorer uses its own generic pattern set.
GENERIC_DESCRIPTION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"responsible\s+for",
        r"helped\s+with",
        r"worked\s+on",
        r"participated\s+in",
        r"involved\s+in",
        r"assisted\s+with",
        r"various\s+projects",
        r"day-to-day",
        r"duties\s+included",
        r"tasks\s+included",
    )
)

VAGUE_PHRASES: tuple[str, ...] = ("responsible for", "worked on", "various", "different", "multiple", "some")

SCOPE_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "leadership": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"led\s+(a\s+)?team",
            r"managed\s+\d+",
            r"mentored",
            r"supervised",
            r"directed",
            r"coordinated\s+(with\s+)?\d+",
        )
    ),
    "scale": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"\d+\s*(million|billion|thousand|k\s+users)",
            r"enterprise",
            r"organization-wide",
            r"company-wide",
            r"cross-functional",
            r"global",
            r"international",
        )
    ),
    "ownership": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"owned",
            r"end-to-end",
            r"architected",
            r"designed\s+and\s+implemented",
            r"built\s+from\s+scratch",
            r"spearheaded",
            r"pioneered",
        )
    ),
    "impact": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"increased\s+.*\d+%",
            r"reduced\s+.*\d+%",
            r"improved\s+.*\d+%",
            r"saved\s+.*\$[\d,]+",
            r"generated\s+.*\$[\d,]+",
            r"drove\s+.*\d+",
            r"achieved\s+.*\d+",
        )
    ),
}

SECTION_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "experience": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"work\s*experience",
            r"professional\s*experience",
            r"employment\s*history",
            r"career\s*history",
            r"experience",
        )
    ),
    "education": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (r"education", r"academic\s*background", r"academic\s*history", r"qualifications")
    ),
    "skills": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"skills",
            r"technical\s*skills",
            r"core\s*competencies",
            r"competencies",
            r"expertise",
            r"technologies",
        )
    ),
    "projects": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (r"projects", r"personal\s*projects", r"side\s*projects", r"portfolio")
    ),
    "certifications": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (r"certifications", r"certificates", r"licenses", r"credentials")
    ),
    "summary": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (r"summary", r"professional\s*summary", r"profile", r"objective", r"about")
    ),
}

STANDARD_SECTION_ORDER: tuple[str, ...] = (
    "summary",
    "experience",
    "skills",
    "education",
    "projects",
    "certifications",
)
ESSENTIAL_SECTIONS: tuple[str, ...] = ("experience", "skills", "education")

LEARNING_SIGNAL_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "certifications": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"certified",
            r"certification",
            r"certificate",
            r"AWS\s*(Certified|Solutions)",
            r"Google\s*Cloud",
            r"Azure",
            r"PMP",
            r"Scrum",
            r"CISSP",
        )
    ),
    "courses": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"completed?\s*(course|training)",
            r"coursera",
            r"udemy",
            r"edx",
            r"linkedin\s*learning",
            r"bootcamp",
        )
    ),
    "progression": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"promoted\s*to",
            r"advanced\s*to",
            r"grew\s*from",
            r"progressed\s*to",
            r"elevated\s*to",
        )
    ),
    "new_skills": tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (r"learned", r"mastered", r"acquired", r"adopted", r"transitioned\s*to")
    ),
}

SCOPE_EXPANSION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"team\s+of\s+(\d+)", re.IGNORECASE),
    re.compile(r"managed\s+(\d+)", re.IGNORECASE),
    re.compile(r"led\s+(\d+)", re.IGNORECASE),
    re.compile(r"\$(\d+)\s*(million|m|k)", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*engineers?", re.IGNORECASE),
)

# Title keyword -> seniority rank used for progression detection.
TITLE_SENIORITY_RANKS: dict[str, int] = {
    "intern": 1,
    "junior": 2,
    "associate": 2,
    "entry": 2,
    "mid": 3,
    "senior": 4,
    "lead": 5,
    "principal": 5,
    "staff": 5,
    "manager": 6,
    "director": 7,
    "vp": 8,
    "head": 8,
    "chief": 9,
}
DEFAULT_TITLE_RANK = 3

EXPERIENCE_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "leadership": ("led", "managed", "directed", "supervised", "mentored", "coached"),
    "cross_functional": ("cross-functional", "collaborated", "stakeholders", "partnered", "coordinated with"),
    "customer_facing": ("customer", "client", "user", "stakeholder", "end-user"),
    "technical_architecture": ("architected", "designed system", "scalable", "infrastructure", "microservices"),
    "data_analysis": ("analyzed", "data-driven", "insights", "metrics", "analytics", "kpis"),
    "project_management": ("managed project", "delivered", "roadmap", "timeline", "sprint", "agile"),
}

JOB_TITLE_KEYWORDS: tuple[str, ...] = (
    "engineer", "developer", "manager", "director", "analyst", "designer", "lead", "senior",
    "junior", "architect", "consultant", "specialist", "coordinator", "associate", "intern",
    "head", "chief", "officer", "president", "founder",
)

# Applied in order; each pattern is matched as a whole word.
TITLE_ABBREVIATIONS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"(?<![A-Za-z])sr\.(?=\s|$)|\bsr\b", "Senior"),
        (r"(?<![A-Za-z])jr\.(?=\s|$)|\bjr\b", "Junior"),
        (r"\bsnr\b\.?", "Senior"),
        (r"\bjnr\b\.?", "Junior"),
        (r"\beng\.(?=\s|$)", "Engineer"),
        (r"\bmgr\b\.?", "Manager"),
        (r"\bdir\b\.?", "Director"),
        (r"\bvp\b", "Vice President"),
        (r"\bpm\b", "Product Manager"),
        (r"\bswe\b", "Software Engineer"),
        (r"\bsde\b", "Software Development Engineer"),
        (r"\bmle\b", "Machine Learning Engineer"),
        (r"\btpm\b", "Technical Program Manager"),
        (r"\bem\b", "Engineering Manager"),
        (r"\bic\b", "Individual Contributor"),
        (r"\bfe\b", "Frontend Engineer"),
        (r"\bbe\b", "Backend Engineer"),
        (r"\bqa\b", "Quality Assurance"),
        (r"\bux\b", "User Experience"),
        (r"\bui\b", "User Interface"),
        (r"\bdevops\b(?!\s+engineer)", "DevOps Engineer"),
        (r"\bfull[\s-]?stack\b", "Full Stack"),
    )
)

SENIORITY_TITLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "lead": ("lead", "principal", "staff", "architect", "director", "head", "chief", "vp", "vice president"),
    "senior": ("senior", "sr.", "sr", "iii", "level 3"),
    "entry": ("junior", "jr", "intern", "associate", "entry", "graduate", "trainee"),
}

FILLER_WORDS: tuple[str, ...] = ("very", "really", "just", "basically", "actually")
BUZZWORDS: tuple[str, ...] = (
    "synergy",
    "leverage",
    "paradigm",
    "streamline",
    "best-in-class",
    "cutting-edge",
    "innovative",
    "world-class",
    "holistic",
)

IMPORTANT_SKILL_CATEGORIES: tuple[str, ...] = (
    "programming_languages",
    "backend_frameworks",
    "frontend_frameworks",
    "cloud_platforms",
    "databases",
    "devops_tools",
)


def has_metric(text: str) -> bool:
    return any(pattern.search(text) for pattern in METRIC_PATTERNS)


def first_word(text: str) -> str:
    words = (text or "").strip().lower().split()
    return words[0] if words else ""


def starts_with_strong_verb(text: str) -> bool:
    word = first_word(text)
    return bool(word) and any(word == verb or word.startswith(verb) for verb in STRONG_ACTION_VERBS)


def starts_with_weak_verb(text: str) -> bool:
    word = first_word(text)
    lowered = (text or "").strip().lower()
    return bool(word) and any(word == verb or lowered.startswith(verb) for verb in WEAK_ACTION_VERBS)
