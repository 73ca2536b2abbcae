"""
Tiered Generation
=================
Shared decision logic for the quest and reflection services.

Decision logic:
    1. If remote generation is enabled AND a real credential is
       configured → call the chat model and parse its reply.
       Any failure (transport, non-2xx, timeout, malformed JSON) →
       static fallback. The heuristic is NOT tried afterwards.
    2. Otherwise → run the heuristic. Any failure → static fallback.
    3. No tier is retried; each runs at most once per call.

Every tier reports back through a TierResult instead of raising, so
the routing above is plain branching on ``result.ok``. The fallback
tier is a constant and cannot fail, which is what lets generate()
promise to never raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from nebula.config import Settings, get_settings
from nebula.models.common import GenerationSource
from nebula.services.generator import ChatCompletionClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TierResult(Generic[T]):
    """Outcome of one tier: a value, or the error that stopped it."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_tier(fn: Callable[..., T], *args: Any) -> TierResult[T]:
    try:
        return TierResult(value=fn(*args))
    except Exception as exc:
        return TierResult(error=exc)


class TieredGenerationService(Generic[T]):
    """Base for a service that produces ``T`` through three tiers.

    Subclasses provide the domain pieces: prompt building, parsing, the
    heuristic and the static fallback.
    """

    domain: str = "generation"
    system_prompt: str = ""

    def __init__(
        self,
        settings: Settings | None = None,
        client: ChatCompletionClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client or ChatCompletionClient(self._settings)

    # --- domain hooks -----------------------------------------------------

    def build_prompt(self, payload: Any) -> str:
        raise NotImplementedError

    def parse(self, raw_response: str) -> T:
        raise NotImplementedError

    def heuristic(self, payload: Any) -> T:
        raise NotImplementedError

    def fallback(self) -> T:
        raise NotImplementedError

    # --- tiers ------------------------------------------------------------

    async def _remote(self, payload: Any) -> TierResult[T]:
        try:
            prompt = self.build_prompt(payload)
            raw = await self._client.complete(self.system_prompt, prompt)
            return TierResult(value=self.parse(raw))
        except Exception as exc:
            return TierResult(error=exc)

    async def generate(self, user_id: str, payload: Any) -> tuple[T, GenerationSource]:
        """Return the best available result and the tier that produced it.

        Never raises.
        """
        if self._settings.remote_generation_enabled:
            tier = GenerationSource.REMOTE
            result = await self._remote(payload)
        else:
            tier = GenerationSource.HEURISTIC
            result = run_tier(self.heuristic, payload)

        if result.ok:
            logger.info("%s for user %s served by %s tier", self.domain, user_id, tier.value)
            return result.value, tier

        logger.error(
            "%s tier failed for %s (user %s), serving static fallback",
            tier.value, self.domain, user_id,
            exc_info=result.error,
        )
        return self.fallback(), GenerationSource.FALLBACK
