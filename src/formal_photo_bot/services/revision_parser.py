"""Extract edit parameters from free-text revision requests."""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.sessions import RevisionUpdate

logger = logging.getLogger(__name__)

_WORD = r"(\w+(?:-\w+)?)"
# A captured value is never a connector or the word "color".
_VALUE = rf"(?!(?:to|into|as|colou?r)\b){_WORD}"
_ARTICLE = r"(?:(?:a|an|the|my)\s+)?"
_BACKGROUND = r"(?:background|backdrop|bg)"
_GENERIC_CLOTHING = ("clothes", "clothing", "outfit")


def _clean(token: str) -> str:
    return " ".join(token.split()).lower()


@dataclass(frozen=True)
class ParameterNormalizer:
    """Maps user tokens to canonical colors and garment categories."""

    config: BotConfig

    def color(self, token: str) -> str:
        """Return the canonical color; unknown tokens pass through lower-cased."""
        cleaned = _clean(token)
        return self.config.color_lexicon.get(cleaned, cleaned)

    def clothing_type(self, token: str) -> str:
        """Return the canonical garment category for a clothing noun."""
        cleaned = _clean(token)
        return self.config.clothing_lexicon.get(cleaned, cleaned)

    def is_clothing_noun(self, token: str) -> bool:
        """Return true when the token is a known clothing noun."""
        return _clean(token) in self.config.clothing_lexicon


def _alternation(words: Iterable[str]) -> str:
    """Build a regex alternation, longest words first."""
    ordered = sorted(set(words), key=len, reverse=True)
    return "|".join(re.escape(word).replace(" ", r"\s+") for word in ordered)


class RevisionParser:
    """Ordered-pattern parser for revision requests.

    Each field has its own ordered pattern list and the first pattern that
    yields an acceptable token wins. Fields are extracted independently, so
    "white background black shirt" sets both colors and leaves the garment
    untouched. Nothing is ever guessed: a field that no pattern matched is
    left out of the update.
    """

    def __init__(self, config: BotConfig) -> None:
        self.normalizer = ParameterNormalizer(config)
        colors = _alternation(config.color_lexicon)
        garments = _alternation(config.clothing_lexicon)
        any_clothing = _alternation([*config.clothing_lexicon, *_GENERIC_CLOTHING])
        flags = re.IGNORECASE

        self.background_patterns: tuple[re.Pattern[str], ...] = (
            re.compile(
                rf"\b(?:change|switch|make|set|turn)\s+{_ARTICLE}{_BACKGROUND}"
                rf"(?:\s+colou?r)?\s+(?:(?:to|into|as)\s+)?{_VALUE}",
                flags,
            ),
            re.compile(rf"\b({colors})\s+{_BACKGROUND}\b", flags),
            re.compile(
                rf"\b{_BACKGROUND}(?:\s+colou?r)?(?:\s*:\s*|\s+(?:(?:to|into)\s+)?)"
                rf"{_VALUE}",
                flags,
            ),
        )
        self.clothing_type_patterns: tuple[re.Pattern[str], ...] = (
            re.compile(
                rf"\b(?:wear|wearing|put\s+on|change|switch|swap)"
                rf"(?:\s+(?:{_alternation(_GENERIC_CLOTHING)}))?"
                rf"(?:\s+(?:to|into|for))?\s+{_ARTICLE}"
                rf"(?:\w+(?:-\w+)?\s+)?({garments})\b",
                flags,
            ),
        )
        self.clothing_color_patterns: tuple[re.Pattern[str], ...] = (
            re.compile(
                rf"\b(?:change|switch|make|turn)\s+{_ARTICLE}(?:{any_clothing})"
                rf"(?:\s+colou?r)?\s+(?:to|into)\s+(?:(?:a|an)\s+)?"
                rf"(?:(?:{garments})\s+)?{_VALUE}",
                flags,
            ),
            re.compile(
                rf"\b(?:make|turn)\s+{_ARTICLE}(?:{any_clothing})\s+({colors})\b",
                flags,
            ),
            re.compile(rf"\b({colors})\s+(?:{any_clothing})\b", flags),
            re.compile(
                rf"\b(?:{any_clothing})\s+(?:(?:to|into)\s+)?({colors})\b", flags
            ),
            re.compile(
                rf"\b(?:{any_clothing})\s+(?:in|colou?r(?:\s+to)?)\s+{_VALUE}",
                flags,
            ),
        )

    def parse(self, text: str | None) -> RevisionUpdate:
        """Return the fields a revision request asks to change."""
        if not text:
            return RevisionUpdate()

        updates: dict[str, str] = {}
        background = self._first_match(self.background_patterns, text)
        if background:
            updates["background_color"] = self.normalizer.color(background)

        clothing_type = self._first_match(self.clothing_type_patterns, text)
        if clothing_type:
            updates["clothing_type"] = self.normalizer.clothing_type(clothing_type)

        clothing_color = self._first_match(
            self.clothing_color_patterns,
            text,
            reject=self.normalizer.is_clothing_noun,
        )
        if clothing_color:
            updates["clothing_color"] = self.normalizer.color(clothing_color)

        update = RevisionUpdate(**updates)
        logger.info("Parsed revision", extra={"text": text, "updates": updates})
        return update

    @staticmethod
    def _first_match(
        patterns: tuple[re.Pattern[str], ...],
        text: str,
        reject: Callable[[str], bool] | None = None,
    ) -> str | None:
        for pattern in patterns:
            match = pattern.search(text)
            if not match:
                continue
            token = match.group(1)
            if reject is not None and reject(token):
                continue
            return token
        return None


def is_valid_revision(update: RevisionUpdate) -> bool:
    """Return true when the update changes at least one parameter."""
    return update.is_valid
