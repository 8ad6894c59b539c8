"""
Spoken Number Lexicons

Word → digit mappings per language, keyed by language-tag prefix.
Non-English entries are the romanized forms browser recognizers emit.
"""

from typing import Dict, Optional

ENGLISH_NUMBER_WORDS: Dict[str, str] = {
    'zero': '0', 'one': '1', 'two': '2', 'three': '3', 'four': '4',
    'five': '5', 'six': '6', 'seven': '7', 'eight': '8', 'nine': '9',
    'ten': '10', 'eleven': '11', 'twelve': '12', 'thirteen': '13',
    'fourteen': '14', 'fifteen': '15', 'sixteen': '16', 'seventeen': '17',
    'eighteen': '18', 'nineteen': '19',
    'twenty': '20', 'thirty': '30', 'forty': '40', 'fifty': '50',
    'sixty': '60', 'seventy': '70', 'eighty': '80', 'ninety': '90',
    'hundred': '100',
}

NUMBER_LEXICONS: Dict[str, Dict[str, str]] = {
    'en': ENGLISH_NUMBER_WORDS,
    # Hindi
    'hi': {
        'shoonya': '0', 'ek': '1', 'do': '2', 'teen': '3', 'char': '4', 'paanch': '5',
        'chhe': '6', 'saat': '7', 'aath': '8', 'nau': '9', 'das': '10',
    },
    # Bengali
    'bn': {
        'shunyo': '0', 'ek': '1', 'dui': '2', 'tin': '3', 'char': '4', 'pach': '5',
        'chhoy': '6', 'sat': '7', 'aath': '8', 'noy': '9', 'dosh': '10',
    },
    # Tamil
    'ta': {
        'suzhi': '0', 'ondru': '1', 'irandu': '2', 'moondru': '3', 'naangu': '4',
        'aindhu': '5', 'aaru': '6', 'ezhu': '7', 'ettu': '8', 'onbadhu': '9', 'pathu': '10',
    },
    # Telugu
    'te': {
        'sonne': '0', 'okati': '1', 'rendu': '2', 'moodu': '3', 'naalugu': '4',
        'aidu': '5', 'aaru': '6', 'edu': '7', 'enimidi': '8', 'tommidi': '9', 'padi': '10',
    },
    # Marathi
    'mr': {
        'shunya': '0', 'ek': '1', 'don': '2', 'teen': '3', 'char': '4', 'panch': '5',
        'saha': '6', 'sat': '7', 'aath': '8', 'nau': '9', 'daha': '10',
    },
    # Gujarati
    'gu': {
        'shunya': '0', 'ek': '1', 'be': '2', 'tran': '3', 'char': '4', 'panch': '5',
        'chh': '6', 'sat': '7', 'aath': '8', 'nav': '9', 'das': '10',
    },
    # Kannada
    'kn': {
        'sonne': '0', 'ondu': '1', 'eradu': '2', 'mooru': '3', 'naalku': '4',
        'aidu': '5', 'aaru': '6', 'elu': '7', 'entu': '8', 'ombattu': '9', 'hattu': '10',
    },
    # Malayalam
    'ml': {
        'poojyam': '0', 'onnu': '1', 'randu': '2', 'moonu': '3', 'naalu': '4',
        'anju': '5', 'aaru': '6', 'ezhu': '7', 'ettu': '8', 'onpathu': '9', 'pathu': '10',
    },
    # Punjabi
    'pa': {
        'sifar': '0', 'ikk': '1', 'do': '2', 'tin': '3', 'char': '4', 'panj': '5',
        'chhe': '6', 'sat': '7', 'atth': '8', 'nau': '9', 'das': '10',
    },
    # Urdu
    'ur': {
        'sifr': '0', 'aik': '1', 'do': '2', 'teen': '3', 'char': '4', 'paanch': '5',
        'chay': '6', 'saat': '7', 'aath': '8', 'nau': '9', 'das': '10',
    },
}

SUPPORTED_LOCALES = tuple(NUMBER_LEXICONS)


def resolve_locale(locale: str) -> Optional[str]:
    """
    Find the lexicon key for a language tag.

    Matches on prefix, so "en-US" and "hi-IN" resolve to their base language.
    Returns None for unsupported tags.
    """
    tag = (locale or "").strip().lower()
    for prefix in NUMBER_LEXICONS:
        if tag.startswith(prefix):
            return prefix
    return None


def get_lexicon(locale: str) -> Dict[str, str]:
    """Get the number lexicon for a language tag (empty when unsupported)."""
    key = resolve_locale(locale)
    return NUMBER_LEXICONS[key] if key else {}
