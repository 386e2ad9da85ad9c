"""
Tokenizer for BM25 text processing.

Tokenization pipeline:
1. Lowercase conversion
2. Unicode NFC normalization (composed diacritics: "e" + U+0301 → "é")
3. Replace every run of non-letter/non-digit characters with a single space
4. Split on whitespace
5. Filter short tokens and stopwords (multilingual base set + custom words)
6. Return list of meaningful tokens

No stemming: tokens are compared verbatim, so query and document text must
go through the same min_length/stopword configuration.
"""

import re
import unicodedata
from typing import FrozenSet, Iterable, List, Optional, Union

# Multilingual stopwords (English, Russian, Ukrainian)
# Kept deliberately small: BM25 IDF already down-weights common terms
BASE_STOPWORDS = frozenset([
    'the', 'is', 'at', 'on', 'a', 'an', 'and', 'or',
    'и', 'на', 'по', 'для', 'как', 'это', 'не', 'из',
    'та', 'що', 'але', 'від',
])

DEFAULT_MIN_TOKEN_LENGTH = 2

# Everything that is not a Unicode letter or digit ("_" counts as a separator)
_SEPARATOR_RE = re.compile(r'[\W_]+')


def build_stopwords(custom: Optional[Union[str, Iterable[str]]] = None) -> FrozenSet[str]:
    """
    Build the active stopword set.

    Args:
        custom: Extra stopwords, either a comma-separated string
            ("foo, Bar,baz") or an iterable of words. Case-insensitive.

    Returns:
        BASE_STOPWORDS united with the normalized custom words

    Examples:
        >>> sorted(build_stopwords("Foo, bar,,") - BASE_STOPWORDS)
        ['bar', 'foo']
    """
    if not custom:
        return BASE_STOPWORDS

    words = custom.split(',') if isinstance(custom, str) else custom
    extra = {str(w).strip().lower() for w in words}
    extra.discard('')
    return BASE_STOPWORDS | extra


def tokenize(
    text: Optional[str],
    min_length: int = DEFAULT_MIN_TOKEN_LENGTH,
    stopwords: FrozenSet[str] = BASE_STOPWORDS,
) -> List[str]:
    """
    Tokenize text for BM25 scoring with stopword removal.

    Args:
        text: Input text to tokenize (None is treated as empty)
        min_length: Minimum token length in characters
        stopwords: Active stopword set (lowercase)

    Returns:
        List of lowercase tokens in document order (duplicates preserved)

    Examples:
        >>> tokenize("Machine-Learning basics!")
        ['machine', 'learning', 'basics']

        >>> tokenize("Это не тест, the end")
        ['тест', 'end']

        >>> tokenize("a b cd", min_length=2)
        ['cd']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    text = unicodedata.normalize('NFC', text.lower())
    text = _SEPARATOR_RE.sub(' ', text)

    return [
        t for t in text.split()
        if len(t) >= min_length and t not in stopwords
    ]
