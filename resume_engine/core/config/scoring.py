from __future__ import annotations

from pathlib import Path
from typing import Any

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "scoring.yaml"

# Weight groups that must each sum to 1.0.
_WEIGHT_GROUPS = ("dimensions.weights", "fit.weights", "fit.technical", "gaps.weights")
_WEIGHT_TOLERANCE = 1e-6


def _lookup(config: dict[str, Any], path: str) -> Any:
    current: Any = config
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _validate_weights(config: dict[str, Any], source: Path) -> None:
    for group in _WEIGHT_GROUPS:
        weights = _lookup(config, group)
        if not isinstance(weights, dict) or not weights:
            raise RuntimeError(f"Invalid scoring config '{source}': missing weight group '{group}'.")
        try:
            total = sum(float(value) for value in weights.values())
        except (TypeError, ValueError) as exc:
            raise RuntimeError(
                f"Invalid scoring config '{source}': non-numeric weight in '{group}'."
            ) from exc
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise RuntimeError(
                f"Invalid scoring config '{source}': weights in '{group}' sum to {total:.4f}, expected 1.0."
            )


def load_scoring_config(path: str | Path) -> dict[str, Any]:
    """Parse and validate a scoring config file without touching the process cache."""
    config_path = Path(path)
    if not config_path.exists():
        raise RuntimeError(
            f"Scoring config not found at '{config_path}'. "
            "Expected file: config/scoring.yaml"
        )

    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:
        raise RuntimeError(
            "Unable to parse scoring config because PyYAML is unavailable. "
            "Install dependency: PyYAML."
        ) from exc

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{config_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # type: ignore[attr-defined]
        raise RuntimeError(f"Invalid YAML in scoring config '{config_path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid scoring config '{config_path}': expected a top-level mapping."
        )

    _validate_weights(parsed, config_path)
    return parsed


def get_scoring_config() -> dict[str, Any]:
    """Load scoring config from repo-level config/scoring.yaml and cache it."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    _SCORING_CONFIG_CACHE = load_scoring_config(_SCORING_CONFIG_PATH)
    return _SCORING_CONFIG_CACHE


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'fit.weights.technical'."""
    if not path:
        return default
    value = _lookup(get_scoring_config(), path)
    return default if value is None else value
