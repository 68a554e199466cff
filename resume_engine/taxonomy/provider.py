from __future__ import annotations

from typing import Protocol


class TaxonomyProvider(Protocol):
    def normalize_skill(self, raw: str) -> str:
        """Return the canonical skill name, or the trimmed input when unknown."""

    def normalize_tool(self, raw: str) -> str | None:
        """Return the canonical tool name, or None when the text names no known tool."""

    def find_skill_category(self, skill: str) -> str | None:
        """Return the skill category of a (possibly non-canonical) skill."""

    def find_tool_category(self, tool: str) -> str | None:
        """Return the tool category of a canonical tool name."""

    def detect_skills(self, text: str) -> list[str]:
        """Canonical skills mentioned in free text, sorted."""

    def detect_tools(self, text: str) -> list[str]:
        """Canonical tools mentioned in free text, sorted."""

    def detect_industries(self, text: str) -> list[str]:
        """Industries with enough distinct keyword hits in free text, sorted."""

    def get_company_industry(self, company: str) -> str | None:
        """Industry of a known company."""
