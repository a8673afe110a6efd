"""
EdAiVi Studio Backend: AI Routes
================================

What:  /api/ai: model catalog, the three metered generation entry points,
       and the caller's credit balance.
How:   Each generation handler calls `ai_service.generate()` with its kind;
       admission, charging and usage statistics all happen in the credit
       gate. Handlers only shape the response.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from studio.dependencies import CurrentUser, StoreDep
from studio.models import AIModel
from studio.schemas.ai import (
    AudioGenerationResponse,
    CreditsResponse,
    GenerateRequest,
    ImageGenerationResponse,
    ModelRef,
    PurchaseCreditsRequest,
    TextGenerationResponse,
)
from studio.schemas.common import ErrorResponse
from studio.services.ai_service import ai_service
from studio.services.credit_gate import MeteredResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])

_GATE_ERRORS = {
    400: {"description": "Missing model_id/prompt or wrong model type", "model": ErrorResponse},
    403: {"description": "Model inactive, tier too low, or not enough credits", "model": ErrorResponse},
    404: {"description": "Model not found", "model": ErrorResponse},
}


def _metering(result: MeteredResult) -> dict:
    return {
        "model": ModelRef(id=result.model.id, name=result.model.display_name),
        "processing_time": result.processing_time,
        "credits_used": result.credits_used,
        "credits_remaining": result.user.usage.ai_credits,
    }


# ── Catalog ───────────────────────────────────────────────────────────────


@router.get("/models", response_model=List[AIModel], summary="Models available to the caller")
async def list_models(
    user: CurrentUser,
    store: StoreDep,
    category: Optional[str] = Query(default=None, description="audio, video, image, text, 3d or multimodal"),
    type: Optional[str] = Query(default=None, description="e.g. text-generation"),
    featured: bool = Query(default=False, description="Only featured models"),
) -> List[AIModel]:
    """Active models the caller's subscription tier may use, featured first."""
    return await ai_service.list_models(store, user, category=category, model_type=type, featured=featured)


@router.get(
    "/models/{model_id}",
    response_model=AIModel,
    responses={403: _GATE_ERRORS[403], 404: _GATE_ERRORS[404]},
    summary="Model detail",
)
async def get_model(model_id: str, user: CurrentUser, store: StoreDep) -> AIModel:
    return await ai_service.get_model(store, user, model_id)


# ── Generation ────────────────────────────────────────────────────────────


@router.post(
    "/generate/text",
    response_model=TextGenerationResponse,
    responses=_GATE_ERRORS,
    summary="Generate text (1 metered call)",
)
async def generate_text(body: GenerateRequest, user: CurrentUser, store: StoreDep) -> TextGenerationResponse:
    result = await ai_service.generate(store, user, "text", body.model_id, body.prompt, body.parameters)
    return TextGenerationResponse(**result.output, **_metering(result))


@router.post(
    "/generate/image",
    response_model=ImageGenerationResponse,
    responses=_GATE_ERRORS,
    summary="Generate an image (1 metered call)",
)
async def generate_image(body: GenerateRequest, user: CurrentUser, store: StoreDep) -> ImageGenerationResponse:
    result = await ai_service.generate(store, user, "image", body.model_id, body.prompt, body.parameters)
    return ImageGenerationResponse(**result.output, **_metering(result))


@router.post(
    "/generate/audio",
    response_model=AudioGenerationResponse,
    responses=_GATE_ERRORS,
    summary="Generate audio or speech (1 metered call)",
)
async def generate_audio(body: GenerateRequest, user: CurrentUser, store: StoreDep) -> AudioGenerationResponse:
    result = await ai_service.generate(store, user, "audio", body.model_id, body.prompt, body.parameters)
    return AudioGenerationResponse(**result.output, **_metering(result))


# ── Credits ───────────────────────────────────────────────────────────────


@router.get("/credits", response_model=CreditsResponse, summary="Credit balance")
async def get_credits(user: CurrentUser) -> CreditsResponse:
    return CreditsResponse(credits=user.usage.ai_credits)


@router.post(
    "/credits/purchase",
    response_model=CreditsResponse,
    responses={400: {"description": "Amount missing or not positive", "model": ErrorResponse}},
    summary="Add credits to the balance",
)
async def purchase_credits(body: PurchaseCreditsRequest, user: CurrentUser, store: StoreDep) -> CreditsResponse:
    balance = await ai_service.purchase_credits(store, user, body.amount)
    return CreditsResponse(credits=balance, message=f"Purchased {body.amount} AI credits")
