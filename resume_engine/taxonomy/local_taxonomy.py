from __future__ import annotations

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .provider import TaxonomyProvider

_DATA_DIR = Path(__file__).with_name("data")

# Alphanumeric look-arounds instead of \b so that "C++", "C#" and ".NET" match as words.
_WORD_LEFT = r"(?<![A-Za-z0-9])"
_WORD_RIGHT = r"(?![A-Za-z0-9])"


def phrase_pattern(phrases: Iterable[str]) -> re.Pattern[str] | None:
    """Case-insensitive whole-word pattern for any of ``phrases`` (longest first)."""
    ordered = sorted({phrase.strip().lower() for phrase in phrases if phrase.strip()}, key=len, reverse=True)
    if not ordered:
        return None
    body = "|".join(re.escape(phrase) for phrase in ordered)
    return re.compile(rf"{_WORD_LEFT}(?:{body}){_WORD_RIGHT}", re.IGNORECASE)


def contains_phrase(text: str, phrase: str) -> bool:
    pattern = phrase_pattern([phrase])
    return bool(pattern and pattern.search(text))


def _compile_groups(groups: dict[str, list[str]]) -> dict[str, re.Pattern[str]]:
    compiled: dict[str, re.Pattern[str]] = {}
    for name, phrases in groups.items():
        pattern = phrase_pattern(phrases)
        if pattern is not None:
            compiled[name] = pattern
    return compiled


def _by_first_match(text: str, patterns: dict[str, re.Pattern[str]]) -> list[str]:
    found: list[tuple[int, str]] = []
    for name, pattern in patterns.items():
        match = pattern.search(text)
        if match:
            found.append((match.start(), name))
    return [name for _, name in sorted(found)]


def _load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid taxonomy file '{path}': expected a JSON object.")
    return raw


class LocalTaxonomy(TaxonomyProvider):
    """Normalization tables backed by the JSON files shipped in ``taxonomy/data``.

    Everything is built once in ``__init__`` and only read afterwards.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        root = Path(data_dir) if data_dir else _DATA_DIR
        skills = _load_json(root / "skills.json")
        tools = _load_json(root / "tools.json")
        industries = _load_json(root / "industries.json")
        companies = _load_json(root / "companies.json")

        self.skill_categories: dict[str, tuple[str, ...]] = {
            str(category): tuple(str(name) for name in names)
            for category, names in skills["categories"].items()
        }
        self._skill_synonyms = {
            str(key).strip().lower(): str(value) for key, value in skills["synonyms"].items()
        }
        self._canonical_skills: dict[str, str] = {}
        self._skill_category_index: dict[str, str] = {}
        for category, names in self.skill_categories.items():
            for name in names:
                self._canonical_skills.setdefault(name.lower(), name)
                self._skill_category_index.setdefault(name, category)

        self.recent_tech: tuple[str, ...] = tuple(skills.get("recent_tech", []))
        self.legacy_tech: tuple[str, ...] = tuple(skills.get("legacy_tech", []))
        self.certification_skills: dict[str, tuple[str, ...]] = {
            str(key).lower(): tuple(values) for key, values in skills.get("certification_skills", {}).items()
        }
        self._transferable: dict[str, frozenset[str]] = {
            str(skill).lower(): frozenset(str(item).lower() for item in related)
            for skill, related in skills.get("transferable", {}).items()
        }

        skill_exclusions = {str(item).lower() for item in skills.get("free_text_exclusions", [])}
        variants_by_skill: dict[str, list[str]] = {}
        for variant, canonical in self._skill_synonyms.items():
            if variant in skill_exclusions:
                continue
            variants_by_skill.setdefault(canonical, []).append(variant)
        self._skill_patterns = _compile_groups(variants_by_skill)

        self.tool_categories: dict[str, tuple[str, ...]] = {
            str(category): tuple(str(name) for name in names)
            for category, names in tools["categories"].items()
        }
        self._tool_category_index: dict[str, str] = {}
        for category, names in self.tool_categories.items():
            for name in names:
                self._tool_category_index.setdefault(name, category)
        self._tool_variants: dict[str, tuple[str, ...]] = {
            str(tool): tuple(str(variant).lower() for variant in variants)
            for tool, variants in tools["variants"].items()
        }
        tool_exclusions = {str(item).lower() for item in tools.get("free_text_exclusions", [])}
        self._tool_patterns = _compile_groups(
            {
                tool: [variant for variant in variants if variant not in tool_exclusions]
                for tool, variants in self._tool_variants.items()
            }
        )

        self.industry_keywords: dict[str, tuple[str, ...]] = {
            str(industry): tuple(str(keyword).lower() for keyword in keywords)
            for industry, keywords in industries["keywords"].items()
        }
        self._industry_keyword_patterns = {
            industry: [(keyword, phrase_pattern([keyword])) for keyword in keywords]
            for industry, keywords in self.industry_keywords.items()
        }
        self.industry_display_names: dict[str, str] = dict(industries.get("display_names", {}))

        self._company_industry: dict[str, str] = {
            str(company): str(industry) for company, industry in companies["industry_by_company"].items()
        }
        self._company_industry_lower = {name.lower(): industry for name, industry in self._company_industry.items()}
        self._company_patterns = {
            name: phrase_pattern([name]) for name in self._company_industry
        }
        self.big_tech: tuple[str, ...] = tuple(companies.get("big_tech", []))
        self.high_growth: tuple[str, ...] = tuple(companies.get("high_growth", []))

    # -- skills ---------------------------------------------------------

    def normalize_skill(self, raw: str) -> str:
        cleaned = (raw or "").strip()
        key = cleaned.lower()
        return self._skill_synonyms.get(key) or self._canonical_skills.get(key) or cleaned

    def normalize_skills(self, skills: Iterable[str]) -> list[str]:
        normalized = {self.normalize_skill(skill) for skill in skills if skill and skill.strip()}
        return sorted(normalized)

    def is_known_skill(self, raw: str) -> bool:
        key = (raw or "").strip().lower()
        return key in self._skill_synonyms or key in self._canonical_skills

    def find_skill_category(self, skill: str) -> str | None:
        return self._skill_category_index.get(self.normalize_skill(skill))

    def detect_skills(self, text: str) -> list[str]:
        if not text:
            return []
        return sorted(skill for skill, pattern in self._skill_patterns.items() if pattern.search(text))

    def detect_skills_in_order(self, text: str) -> list[str]:
        """Detected skills ordered by their first mention in ``text``."""
        return _by_first_match(text, self._skill_patterns) if text else []

    def skills_for_certification(self, certification: str) -> list[str]:
        lowered = (certification or "").lower()
        inferred: list[str] = []
        for keyword, skills in self.certification_skills.items():
            if keyword in lowered:
                inferred.extend(skills)
        return inferred

    # -- tools ----------------------------------------------------------

    def normalize_tool(self, raw: str) -> str | None:
        lowered = (raw or "").strip().lower()
        if not lowered:
            return None
        for tool, variants in self._tool_variants.items():
            if lowered in variants:
                return tool
        best: tuple[int, str] | None = None
        for tool, pattern in self._tool_patterns.items():
            match = pattern.search(lowered)
            if match and (best is None or len(match.group(0)) > best[0]):
                best = (len(match.group(0)), tool)
        return best[1] if best else None

    def normalize_tools(self, tools: Iterable[str]) -> list[str]:
        normalized = {self.normalize_tool(tool) or tool.strip() for tool in tools if tool and tool.strip()}
        return sorted(normalized)

    def find_tool_category(self, tool: str) -> str | None:
        return self._tool_category_index.get(tool)

    def detect_tools(self, text: str) -> list[str]:
        if not text:
            return []
        return sorted(tool for tool, pattern in self._tool_patterns.items() if pattern.search(text))

    def detect_tools_in_order(self, text: str) -> list[str]:
        return _by_first_match(text, self._tool_patterns) if text else []

    # -- industries and companies ---------------------------------------

    def detect_industries(self, text: str, *, min_hits: int = 2) -> list[str]:
        if not text:
            return []
        detected: list[str] = []
        for industry, keyword_patterns in self._industry_keyword_patterns.items():
            hits = sum(1 for _, pattern in keyword_patterns if pattern and pattern.search(text))
            if hits >= min_hits:
                detected.append(industry)
        return sorted(detected)

    def industry_display_name(self, industry: str) -> str:
        return self.industry_display_names.get(industry, industry)

    def get_company_industry(self, company: str) -> str | None:
        name = (company or "").strip()
        if not name:
            return None
        if name in self._company_industry:
            return self._company_industry[name]
        lowered = name.lower()
        if lowered in self._company_industry_lower:
            return self._company_industry_lower[lowered]
        company_pattern = phrase_pattern([name])
        for known, pattern in self._company_patterns.items():
            if pattern and pattern.search(name):
                return self._company_industry[known]
            if company_pattern and company_pattern.search(known):
                return self._company_industry[known]
        return None

    def extract_industries_from_companies(self, companies: Iterable[str]) -> list[str]:
        industries = {self.get_company_industry(company) for company in companies}
        return sorted(industry for industry in industries if industry)

    def is_big_tech(self, company: str) -> bool:
        return self._matches_company_list(company, self.big_tech)

    def is_high_growth(self, company: str) -> bool:
        return self._matches_company_list(company, self.high_growth)

    @staticmethod
    def _matches_company_list(company: str, names: tuple[str, ...]) -> bool:
        if not company:
            return False
        return any(contains_phrase(company, name) for name in names)

    # -- transferability ------------------------------------------------

    def are_skills_transferable(self, resume_skill: str, target_skill: str) -> bool:
        source = (resume_skill or "").strip().lower()
        target = (target_skill or "").strip().lower()
        if not source or not target:
            return False
        if source == target:
            return True
        return target in self._transferable.get(source, frozenset())

    def find_transferable_skills(self, resume_skills: Iterable[str], missing_skills: Iterable[str]) -> list[str]:
        missing = list(missing_skills)
        transferable: list[str] = []
        for skill in resume_skills:
            if skill in transferable:
                continue
            if any(self.are_skills_transferable(skill, target) for target in missing):
                transferable.append(skill)
        return transferable
