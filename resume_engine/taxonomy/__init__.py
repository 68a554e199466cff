from functools import lru_cache

from .local_taxonomy import LocalTaxonomy, contains_phrase, phrase_pattern
from .provider import TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy() -> LocalTaxonomy:
    return LocalTaxonomy()


__all__ = [
    "LocalTaxonomy",
    "TaxonomyProvider",
    "contains_phrase",
    "get_default_taxonomy",
    "phrase_pattern",
]
