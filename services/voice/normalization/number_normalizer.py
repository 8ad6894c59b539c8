"""
Spoken Number Normalizer

Turns recognized speech such as "f i v e", "twenty one" or "1 0" into
digit strings, using the number lexicon of the speaker's language.
"""

import re
from functools import lru_cache
from typing import List, Tuple, Pattern

from services.voice.normalization.base_normalizer import BaseNormalizer, RewritePass
from services.voice.normalization.lexicons import NUMBER_LEXICONS, resolve_locale


# Letter-by-letter spellings, longest first
SPELLED_PATTERNS = [
    re.compile(r'\b' + r'\s+'.join([r'([a-z])'] * size) + r'\b')
    for size in (5, 4, 3)
]

DIGIT_RUN = re.compile(r'\b\d(?:\s+\d)+\b')
TENS_AND_ONES = re.compile(r'\b([2-9])0\s([1-9])\b')
ONE_HUNDRED = re.compile(r'\b1(?:\s100|\s?00)\b')
WHITESPACE = re.compile(r'\s+')


@lru_cache(maxsize=None)
def _word_pattern(lexicon_key: str) -> Pattern:
    """Whole-word alternation over a lexicon, longest words first."""
    words = sorted(NUMBER_LEXICONS[lexicon_key], key=len, reverse=True)
    return re.compile(r'\b(' + '|'.join(re.escape(w) for w in words) + r')\b')


def merge_digit_runs(text: str) -> str:
    """'1 0' → '10', '2 0 5' → '205'."""
    return DIGIT_RUN.sub(lambda m: WHITESPACE.sub('', m.group(0)), text)


def merge_tens_and_ones(text: str) -> str:
    """'20 1' → '21'."""
    return TENS_AND_ONES.sub(lambda m: m.group(1) + m.group(2), text)


def collapse_one_hundred(text: str) -> str:
    return ONE_HUNDRED.sub('100', text)


class NumberWordNormalizer(BaseNormalizer):
    """
    Normalize spoken numbers in any supported language.

    Handles:
    - Spelled-out words: "f i v e" → "5"
    - Spaced digits: "1 0" → "10"
    - Number words: "paanch" (hi) → "5"
    - Compounds: "twenty one" → "21"
    - "one hundred" → "100"

    Text around the numbers is kept, so "4 - i like things clean"
    stays readable. Unsupported locales only get lowercased and trimmed.
    """

    def passes(self, locale: str) -> List[RewritePass]:
        lexicon_key = resolve_locale(locale)
        if lexicon_key is None:
            return []

        lexicon = NUMBER_LEXICONS[lexicon_key]
        words = _word_pattern(lexicon_key)

        def join_spelled(text: str) -> str:
            def join(match: re.Match) -> str:
                joined = ''.join(match.groups())
                return joined if joined in lexicon else match.group(0)

            for pattern in SPELLED_PATTERNS:
                text = pattern.sub(join, text)
            return text

        return [
            ("spelled_words", join_spelled),
            ("digit_runs", merge_digit_runs),
            ("number_words", lambda text: words.sub(lambda m: lexicon[m.group(1)], text)),
            ("tens_and_ones", merge_tens_and_ones),
            ("one_hundred", collapse_one_hundred),
            ("digit_runs", merge_digit_runs),
        ]

    def validate(self, number: str) -> Tuple[bool, float]:
        """
        Check whether the normalized answer is a bare number.

        Args:
            number: Normalized text

        Returns:
            Tuple of (is_valid, confidence)
        """
        if not number:
            return False, 0.0

        if re.fullmatch(r'\d+', number):
            return True, 0.95
        if re.search(r'\d', number):
            return True, 0.6
        return False, 0.3


_default_normalizer = NumberWordNormalizer()


def normalize_spoken_number(text: str, locale: str = "en") -> str:
    """Normalize spoken numbers in text for the given language tag."""
    return _default_normalizer.normalize(text, {"locale": locale})
