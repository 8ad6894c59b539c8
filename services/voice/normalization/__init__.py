"""
Normalization Package

Spoken-input normalizers for interview answers.
"""

from services.voice.normalization.base_normalizer import BaseNormalizer, NormalizationResult
from services.voice.normalization.lexicons import (
    NUMBER_LEXICONS,
    SUPPORTED_LOCALES,
    get_lexicon,
    resolve_locale,
)
from services.voice.normalization.number_normalizer import (
    NumberWordNormalizer,
    normalize_spoken_number,
)

__all__ = [
    'BaseNormalizer',
    'NormalizationResult',
    'NUMBER_LEXICONS',
    'SUPPORTED_LOCALES',
    'get_lexicon',
    'resolve_locale',
    'NumberWordNormalizer',
    'normalize_spoken_number',
]
