"""
Category inference from the merchant name and email text.
"""

import re
from functools import lru_cache

from ..lexicon import DEFAULT_LEXICON, FALLBACK_CATEGORY, Lexicon


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str) -> re.Pattern:
    # Anchored at a word start: "gas" must not fire inside "pagaste"
    return re.compile(rf"(?<!\w){re.escape(keyword)}")


def keyword_in(keyword: str, *haystacks: str) -> bool:
    """Check whether a keyword starts a word in any of the haystacks."""
    pattern = _keyword_pattern(keyword)
    return any(pattern.search(haystack) for haystack in haystacks)


def infer_category(merchant: str, text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> str:
    """
    Pick the first category, in table order, with a matching keyword.

    Args:
        merchant: Extracted merchant name (any case)
        text: Normalized (lower-cased) email text
        lexicon: Lookup tables; the category table is consulted in order

    Returns:
        Category label, or "Otros" when nothing matches
    """
    lower_merchant = merchant.lower()
    for category, keywords in lexicon.category_keywords.items():
        if any(keyword_in(keyword, lower_merchant, text) for keyword in keywords):
            return category
    return FALLBACK_CATEGORY
