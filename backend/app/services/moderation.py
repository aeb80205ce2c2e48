"""
Content Moderation Service

Uses the Gemini generateContent API to label a piece of user text as
"appropriate" or "inappropriate".

Failure policy:
1. The classifier's own safety filter refused to answer -> inappropriate
2. No API key, transport error, timeout, unexpected payload -> appropriate
"""
import logging
from enum import Enum
from typing import Optional

import httpx

logger = logging.getLogger("uvicorn.error")

# Reasons Gemini gives when its own content filter refuses to answer
BLOCK_REASONS = frozenset({"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"})


class Verdict(str, Enum):
    APPROPRIATE = "appropriate"
    INAPPROPRIATE = "inappropriate"


class SafetyBlocked(Exception):
    """The classifier withheld its answer because of its safety filter."""


class ClassifierResponseError(Exception):
    """The classifier answered with a payload we cannot read."""


class ModerationFilter:
    """Text moderation backed by an external classifier. classify() never raises."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self.timeout = timeout
        self._client = http_client

    @classmethod
    def from_settings(cls, settings, http_client: Optional[httpx.AsyncClient] = None) -> "ModerationFilter":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.moderation_model,
            api_base=settings.moderation_api_base,
            timeout=settings.moderation_timeout_seconds,
            http_client=http_client,
        )

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def classify(self, text: str) -> Verdict:
        """
        Classify a text string.

        Parameters:
            text: User supplied title, content or comment

        Returns:
            Verdict.INAPPROPRIATE only when the classifier answers exactly
            "inappropriate" (after trimming and case-folding) or blocks the
            request for safety reasons; Verdict.APPROPRIATE otherwise.
        """
        # TODO: the two failure modes pull in opposite directions (blocked -> flag,
        # unreachable -> publish); revisit once there is a moderation review queue.
        if not self.is_available():
            logger.error("[moderation] API key is missing, treating content as appropriate")
            return Verdict.APPROPRIATE

        try:
            answer = await self._generate(self._build_prompt(text))
        except SafetyBlocked:
            logger.warning("[moderation] classifier blocked the request for safety, flagging content")
            return Verdict.INAPPROPRIATE
        except Exception as e:
            logger.warning("[moderation] classifier call failed, treating content as appropriate: %r", e)
            return Verdict.APPROPRIATE

        logger.info("[moderation] classifier answered %r", answer)
        return self.parse_label(answer)

    async def is_flagged(self, text: str) -> bool:
        return await self.classify(text) is Verdict.INAPPROPRIATE

    async def classify_many(self, *texts: str) -> list[Verdict]:
        """Classify several texts one after another, in order; every call is always made."""
        return [await self.classify(t) for t in texts]

    @staticmethod
    def parse_label(answer: str) -> Verdict:
        if answer.strip().lower() == Verdict.INAPPROPRIATE.value:
            return Verdict.INAPPROPRIATE
        return Verdict.APPROPRIATE

    def _build_prompt(self, text: str) -> str:
        """Build the classification prompt"""
        return (
            'You only read user data and return exactly one word: "appropriate" or "inappropriate". '
            'Single words like "hi", "hello", "click", "mother", "father" and most other single '
            "common words should be considered appropriate. "
            "Hate speech is inappropriate. "
            f"For: {text}"
        )

    async def _generate(self, prompt: str) -> str:
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.0},
        }

        if self._client is not None:
            resp = await self._client.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
        resp.raise_for_status()
        return self._extract_text(resp.json())

    @staticmethod
    def _extract_text(result: dict) -> str:
        feedback = result.get("promptFeedback") or {}
        if feedback.get("blockReason") in BLOCK_REASONS:
            raise SafetyBlocked(feedback.get("blockReason"))

        candidates = result.get("candidates") or []
        if not candidates:
            raise ClassifierResponseError(f"no candidates (blockReason={feedback.get('blockReason')})")

        candidate = candidates[0]
        if candidate.get("finishReason") in BLOCK_REASONS:
            raise SafetyBlocked(candidate.get("finishReason"))

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            raise ClassifierResponseError("empty candidate text")
        return text
