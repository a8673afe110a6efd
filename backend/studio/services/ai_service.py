"""
EdAiVi Studio Backend: AI Service
=================================

What:  Model catalog queries, simulated generation, and the credit wallet.
How:   Every generation entry point goes through `credit_gate.run_metered()`
       with its own set of accepted model types; the generators below only
       mint placeholder output.
Who:   Called by routes/ai.py.

Entry points and accepted model types:
    text   → text-generation
    image  → image-generation
    audio  → audio-generation, text-to-speech
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from studio.config import settings
from studio.database import Store
from studio.exceptions import ValidationError
from studio.models import AIModel, User
from studio.services.credit_gate import Generation, MeteredResult, credit_gate

logger = logging.getLogger(__name__)

ACCEPTED_TYPES: Dict[str, tuple] = {
    "text": ("text-generation",),
    "image": ("image-generation",),
    "audio": ("audio-generation", "text-to-speech"),
}

GENERATED_AUDIO_DURATION = 10.5  # seconds


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class AIService:
    """Catalog, generation and credits."""

    # ── Catalog ───────────────────────────────────────────────────────────

    async def list_models(
        self,
        store: Store,
        user: User,
        category: Optional[str] = None,
        model_type: Optional[str] = None,
        featured: bool = False,
    ) -> List[AIModel]:
        """
        Active models the caller's tier may use, featured first, then by name.
        """

        def matches(model: AIModel) -> bool:
            if not model.is_active:
                return False
            if category and model.category != category:
                return False
            if model_type and model.type != model_type:
                return False
            if featured and not model.is_featured:
                return False
            return credit_gate.tier_allows(user, model)

        return await store.ai_models.find(
            matches,
            sort_key=lambda m: (not m.is_featured, m.name),
        )

    async def get_model(self, store: Store, user: User, model_id: str) -> AIModel:
        model = await credit_gate.load_model(store, model_id)
        credit_gate.check(user, model, require_credits=False)
        return model

    # ── Generation ────────────────────────────────────────────────────────

    async def generate(
        self,
        store: Store,
        user: User,
        kind: str,
        model_id: Optional[str],
        prompt: Optional[str],
        parameters: Optional[Dict[str, Any]] = None,
    ) -> MeteredResult:
        """
        Run one metered generation of `kind` ('text', 'image' or 'audio').

        Raises:
            ValidationError: model_id or prompt missing, or wrong model type
            NotFoundError / ModelInactiveError / TierRequiredError /
            InsufficientCreditsError: from the credit gate
        """
        if not model_id or not prompt:
            raise ValidationError(
                "model_id and prompt are required",
                context={"model_id": bool(model_id), "prompt": bool(prompt)},
            )

        generators = {
            "text": self._generate_text,
            "image": self._generate_image,
            "audio": self._generate_audio,
        }

        async def run(model: AIModel) -> Generation:
            return await generators[kind](model, prompt, parameters or {})

        return await credit_gate.run_metered(
            store,
            user,
            model_id,
            accepted_types=ACCEPTED_TYPES[kind],
            generate=run,
        )

    # Placeholder generators: no inference happens, only the output shape.
    # Token count is approximated by the prompt length.

    async def _generate_text(self, model: AIModel, prompt: str, parameters: Dict[str, Any]) -> Generation:
        await asyncio.sleep(0)
        text = (
            f'Generated text based on prompt: "{prompt}"\n\n'
            f"This is a demonstration response from model {model.display_name}."
        )
        return Generation(output={"text": text}, token_count=len(prompt))

    async def _generate_image(self, model: AIModel, prompt: str, parameters: Dict[str, Any]) -> Generation:
        await asyncio.sleep(0)
        url = f"{settings.media_base_url}/generated/images/{_epoch_ms()}.jpg"
        return Generation(output={"image_url": url, "prompt": prompt}, token_count=len(prompt))

    async def _generate_audio(self, model: AIModel, prompt: str, parameters: Dict[str, Any]) -> Generation:
        await asyncio.sleep(0)
        url = f"{settings.media_base_url}/generated/audio/{_epoch_ms()}.mp3"
        return Generation(
            output={"audio_url": url, "duration": GENERATED_AUDIO_DURATION, "prompt": prompt},
            token_count=len(prompt),
        )

    # ── Credits ───────────────────────────────────────────────────────────

    async def purchase_credits(self, store: Store, user: User, amount: Optional[int]) -> int:
        """Add credits to the caller's balance. Payment is out of scope."""
        if not amount or amount <= 0:
            raise ValidationError("A positive amount is required", field="amount")
        balance = user.adjust_credits(amount)
        await store.users.update(user)
        logger.info("Credits purchased", extra={"user_id": user.id, "amount": amount, "balance": balance})
        return balance


ai_service = AIService()
