"""
Base Normalizer

Shared rewrite loop for spoken-answer normalizers. A normalizer supplies
its ordered rewrite passes per locale; the base class runs them until the
text settles and can trace every rewrite for debugging.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Any, Optional, Tuple


# (name, rewrite) pairs, applied in list order
RewritePass = Tuple[str, Callable[[str], str]]


@dataclass
class NormalizationResult:
    """Result from a traced normalization run."""
    value: str
    locale: str
    is_valid: bool
    confidence: float
    rounds: int = 0
    steps: List[str] = field(default_factory=list)


class BaseNormalizer(ABC):
    """
    Abstract base class for spoken-answer normalizers.

    Subclasses implement:
    - passes(): Ordered rewrite passes for a locale (empty when unsupported)
    - validate(): Whether the normalized answer is usable
    """

    # Each round must leave the text unchanged or shorten it
    max_rounds: int = 32

    def __init__(self, default_locale: str = "en"):
        self.default_locale = default_locale

    @abstractmethod
    def passes(self, locale: str) -> List[RewritePass]:
        pass

    @abstractmethod
    def validate(self, text: str) -> Tuple[bool, float]:
        """
        Validate a normalized answer.

        Returns:
            Tuple of (is_valid, confidence_score)
        """
        pass

    def normalize(
        self,
        text: str,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Normalize recognized speech.

        Args:
            text: Raw recognized speech
            context: Optional {"locale": "<language tag>"}

        Returns:
            Normalized text
        """
        value, _ = self._rewrite(text, self._locale(context))
        return value

    def process(
        self,
        text: str,
        context: Optional[Dict[str, Any]] = None
    ) -> NormalizationResult:
        """Normalize and validate, recording each rewrite that fired."""
        locale = self._locale(context)
        steps: List[str] = []

        value, rounds = self._rewrite(text, locale, steps)
        is_valid, confidence = self.validate(value)
        steps.append(f"validated: valid={is_valid}, confidence={confidence:.2f}")

        return NormalizationResult(
            value=value,
            locale=locale,
            is_valid=is_valid,
            confidence=confidence,
            rounds=rounds,
            steps=steps,
        )

    def clean_input(self, text: str) -> str:
        if not text:
            return ""
        return text.strip().lower()

    def _locale(self, context: Optional[Dict[str, Any]]) -> str:
        return (context or {}).get("locale") or self.default_locale

    def _rewrite(
        self,
        text: str,
        locale: str,
        steps: Optional[List[str]] = None
    ) -> Tuple[str, int]:
        """Run the passes round after round until the text stops changing."""
        result = self.clean_input(text)
        if steps is not None and result != text:
            steps.append(f"cleaned: '{text}' → '{result}'")

        passes = self.passes(locale)
        if not result or not passes:
            return result, 0

        rounds = 0
        while rounds < self.max_rounds:
            rounds += 1
            before = result
            for name, rewrite in passes:
                rewritten = rewrite(result)
                if steps is not None and rewritten != result:
                    steps.append(f"round {rounds} {name}: '{result}' → '{rewritten}'")
                result = rewritten
            if result == before:
                break

        return result, rounds
