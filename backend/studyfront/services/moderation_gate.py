"""Moderation Gate — accept/reject user text before it reaches the authoritative store.

Invariants:
    - Remote classifier configured and answering → its verdict is final
    - Remote failure (network, timeout, bad shape) → local keyword check;
      the failure is logged, never raised
    - enforce() raises ModerationRejectedError on any flag; nothing is queued

Design Decisions:
    - Classifier injected as a ContentClassifier protocol: None means
      "not configured" and goes straight to the keyword floor
"""

import logging

from studyfront.core.errors import ModerationRejectedError, UpstreamServiceError
from studyfront.core.moderation_keywords import (
    GENERIC_REASON,
    ModerationVerdict,
    basic_content_check,
    verdict_from_categories,
)
from studyfront.core.repository_protocols import ContentClassifier

logger = logging.getLogger(__name__)


class ModerationGate:
    def __init__(self, classifier: ContentClassifier | None = None):
        self._classifier = classifier

    async def moderate(self, text: str) -> ModerationVerdict:
        """Classify `text`, degrading to the keyword check on remote failure."""
        if self._classifier is not None:
            try:
                flagged, categories = await self._classifier.classify(text)
                return verdict_from_categories(flagged, categories)
            except UpstreamServiceError as e:
                logger.warning(
                    f"Moderation service failed, using keyword check: {e.message}",
                    extra={"service": e.service, "error_code": e.code},
                )
        return basic_content_check(text)

    async def enforce(self, *texts: str) -> None:
        """Moderate each text in order; the first flag rejects the write."""
        for text in texts:
            verdict = await self.moderate(text)
            if verdict.flagged:
                raise ModerationRejectedError(verdict.reason or GENERIC_REASON)
