from .entities import analyze_bullet_quality, extract_entities, infer_seniority_from_title, normalize_title

__all__ = ["analyze_bullet_quality", "extract_entities", "infer_seniority_from_title", "normalize_title"]
