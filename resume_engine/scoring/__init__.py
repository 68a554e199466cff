from .execution_impact import calculate_execution_impact_score
from .fit import (
    calculate_fit_dimensions,
    calculate_fit_score,
    calculate_quality_factor,
    evaluate_fit,
    generate_fit_flags,
)
from .generic import evaluate_generic, get_level
from .learning_adaptivity import calculate_learning_adaptivity_score
from .signal_quality import calculate_signal_quality_score, detect_sections
from .skill_capital import calculate_skill_capital_score

__all__ = [
    "calculate_execution_impact_score",
    "calculate_fit_dimensions",
    "calculate_fit_score",
    "calculate_quality_factor",
    "evaluate_fit",
    "generate_fit_flags",
    "evaluate_generic",
    "get_level",
    "calculate_learning_adaptivity_score",
    "calculate_signal_quality_score",
    "detect_sections",
    "calculate_skill_capital_score",
]
