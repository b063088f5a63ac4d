"""Local Moderation Check — keyword floor used when no remote classifier answers.

Invariants:
    - Case-insensitive substring match; first listed keyword that matches flags
    - No scoring, no partial matches, no context: this is a floor, not a classifier
"""

from dataclasses import dataclass


MODERATION_KEYWORDS: tuple[str, ...] = (
    "hate",
    "violence",
    "harassment",
    "threat",
    "abuse",
    "spam",
    "scam",
    "phishing",
)
GENERIC_REASON = "Content may violate community guidelines"


@dataclass(frozen=True)
class ModerationVerdict:
    flagged: bool
    reason: str | None = None


def basic_content_check(text: str) -> ModerationVerdict:
    lowered = text.lower()
    for keyword in MODERATION_KEYWORDS:
        if keyword in lowered:
            return ModerationVerdict(flagged=True, reason=GENERIC_REASON)
    return ModerationVerdict(flagged=False)


def verdict_from_categories(flagged: bool, categories: list[str]) -> ModerationVerdict:
    """Translate a remote classifier answer into a verdict."""
    if not flagged:
        return ModerationVerdict(flagged=False)
    if not categories:
        return ModerationVerdict(flagged=True, reason=GENERIC_REASON)
    return ModerationVerdict(
        flagged=True, reason=f"Content flagged for: {', '.join(categories)}",
    )
