from .gap_detection import detect_gaps, detect_generic_gaps, summarize_gaps
from .recommendation import (
    PotentialImprovement,
    estimate_potential_improvement,
    generate_recommendation,
    suggest_alternatives,
)

__all__ = [
    "detect_gaps",
    "detect_generic_gaps",
    "summarize_gaps",
    "PotentialImprovement",
    "estimate_potential_improvement",
    "generate_recommendation",
    "suggest_alternatives",
]
