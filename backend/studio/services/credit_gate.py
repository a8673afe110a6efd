"""
EdAiVi Studio Backend: Subscription-Tier + Credit Gate
======================================================

What:  The single admission policy in front of every metered AI entry point.
How:   `check()` evaluates the rules in a fixed order and raises the first
       failing rule's exception. `run_metered()` wraps check → generate →
       charge → record-stats for one request.
Who:   AIService (generation, model detail, model listing).

Admission (all must hold):
    model.is_active
    tier(user.plan) >= tier(model.restrictions.min_user_level)
    user.usage.ai_credits >= model.credits_per_use        (metered calls only)

Rejection order:
    NotFoundError (404) → ModelInactiveError (403) → ValidationError for a
    model type the entry point does not accept (400) → TierRequiredError (403)
    → InsufficientCreditsError (403)

A rejected request never touches credits or statistics.

Concurrency:
    With `settings.serialize_credit_charges` on, check-and-charge for one
    user runs under that user's asyncio.Lock, so two concurrent requests
    cannot both spend the same last credit. Requests of different users
    never wait on each other.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterable, Optional

from studio.config import settings
from studio.database import Store
from studio.exceptions import (
    InsufficientCreditsError,
    ModelInactiveError,
    NotFoundError,
    TierRequiredError,
    ValidationError,
)
from studio.models import AIModel, User

logger = logging.getLogger(__name__)

TIER_ORDER = ("free", "basic", "pro", "enterprise")


def tier_index(tier: Optional[str]) -> int:
    """Position of `tier` in TIER_ORDER. Missing or unknown tiers rank as free."""
    try:
        return TIER_ORDER.index(tier or "free")
    except ValueError:
        return 0


@dataclass
class Generation:
    """What a simulated generator hands back to the gate."""

    output: Dict[str, Any]
    token_count: int = 0


@dataclass
class MeteredResult:
    output: Dict[str, Any]
    model: AIModel
    user: User
    processing_time: int  # milliseconds
    credits_used: int


class CreditGate:
    """Tier and credit admission policy with per-user charge serialization."""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    # ── Pure policy checks ────────────────────────────────────────────────

    @staticmethod
    def tier_allows(user: User, model: AIModel) -> bool:
        return tier_index(user.plan) >= tier_index(model.restrictions.min_user_level)

    def check(
        self,
        user: User,
        model: AIModel,
        accepted_types: Optional[Iterable[str]] = None,
        require_credits: bool = True,
    ) -> None:
        """
        Raise the first failing admission rule, or return None.

        `accepted_types=None` skips the entry-point type rule;
        `require_credits=False` skips the credit rule (model detail view).
        """
        if not model.is_active:
            raise ModelInactiveError(model.id)

        if accepted_types is not None:
            accepted = tuple(accepted_types)
            if model.type not in accepted:
                raise ValidationError(
                    f"Model '{model.name}' cannot be used for this operation",
                    field="model_id",
                    context={"model_type": model.type, "accepted_types": list(accepted)},
                )

        if not self.tier_allows(user, model):
            raise TierRequiredError(
                required_tier=model.restrictions.min_user_level or "free",
                current_tier=user.plan,
            )

        if require_credits and user.usage.ai_credits < model.credits_per_use:
            raise InsufficientCreditsError(
                required=model.credits_per_use,
                available=user.usage.ai_credits,
            )

    async def load_model(self, store: Store, model_id: str) -> AIModel:
        model = await store.ai_models.find_by_id(model_id)
        if model is None:
            raise NotFoundError("AI model", model_id)
        return model

    # ── Metered invocation ────────────────────────────────────────────────

    @asynccontextmanager
    async def _charge_guard(self, user_id: str) -> AsyncIterator[None]:
        if not settings.serialize_credit_charges:
            yield
            return
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        async with lock:
            yield

    async def run_metered(
        self,
        store: Store,
        user: User,
        model_id: str,
        accepted_types: Iterable[str],
        generate: Callable[[AIModel], Awaitable[Generation]],
    ) -> MeteredResult:
        """
        Admit, generate, charge and record one metered request.

        Steps (under the caller's lock when serialization is on):
            1. Re-read the user so the balance checked is the current one
            2. Load the model (404) and run `check()`
            3. Await `generate(model)` and time it
            4. Deduct `credits_per_use`, then fold the sample into usage_stats
        """
        async with self._charge_guard(user.id):
            current = await store.users.find_by_id(user.id) or user
            model = await self.load_model(store, model_id)
            self.check(current, model, accepted_types=accepted_types)

            started = time.perf_counter()
            generation = await generate(model)
            processing_time = int((time.perf_counter() - started) * 1000)

            current.adjust_credits(-model.credits_per_use)
            await store.users.update(current)

            model.usage_stats.record(
                user_id=current.id,
                processing_time=processing_time,
                token_count=generation.token_count,
                cost=model.cost_per_use,
            )
            await store.ai_models.update(model)

        logger.info(
            "Metered call admitted",
            extra={
                "user_id": current.id,
                "model_id": model.id,
                "credits_used": model.credits_per_use,
                "credits_left": current.usage.ai_credits,
            },
        )
        return MeteredResult(
            output=generation.output,
            model=model,
            user=current,
            processing_time=processing_time,
            credits_used=model.credits_per_use,
        )


credit_gate = CreditGate()
