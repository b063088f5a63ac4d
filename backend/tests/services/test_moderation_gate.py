"""Moderation Gate — remote verdicts, keyword fallback, enforcement."""

import pytest

from studyfront.core.errors import ModerationRejectedError, UpstreamServiceError
from studyfront.core.moderation_keywords import GENERIC_REASON
from studyfront.services.moderation_gate import ModerationGate
from tests.services.fakes import FakeClassifier


async def test_keyword_check_without_classifier():
    verdict = await ModerationGate().moderate("This is a SCAM offer")
    assert verdict.flagged is True
    assert verdict.reason == GENERIC_REASON


async def test_clean_text_passes_without_classifier():
    verdict = await ModerationGate().moderate("Office hours moved to Friday")
    assert verdict.flagged is False


async def test_remote_verdict_names_categories():
    classifier = FakeClassifier(flagged=True, categories=["harassment", "violence"])
    verdict = await ModerationGate(classifier).moderate("some text")
    assert verdict.reason == "Content flagged for: harassment, violence"
    assert classifier.seen == ["some text"]


async def test_remote_verdict_is_final():
    # A keyword the local check would flag, but the classifier says clean
    verdict = await ModerationGate(FakeClassifier()).moderate("spam folder settings")
    assert verdict.flagged is False


async def test_remote_failure_falls_back_to_keywords():
    classifier = FakeClassifier(error=UpstreamServiceError("timed out", "moderation", "timeout"))
    gate = ModerationGate(classifier)
    assert (await gate.moderate("phishing link here")).flagged is True
    assert (await gate.moderate("lecture notes")).flagged is False


async def test_enforce_rejects_on_first_flag():
    classifier = FakeClassifier()
    await ModerationGate(classifier).enforce("fine title", "fine body")
    assert classifier.seen == ["fine title", "fine body"]

    with pytest.raises(ModerationRejectedError) as exc_info:
        await ModerationGate().enforce("Clean title", "this is hate speech")
    assert exc_info.value.message == GENERIC_REASON
