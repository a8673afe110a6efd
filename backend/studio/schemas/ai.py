"""
EdAiVi Studio Backend: AI Catalog and Generation Schemas
========================================================

What:  Request/response contracts for /api/ai.
How:   Generation requests accept a missing `model_id` / `prompt` at the
       schema level so the service can report them as one BadRequest with
       the same message the rest of the API uses.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    model_id: Optional[str] = None
    prompt: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"protected_namespaces": ()}


class ModelRef(BaseModel):
    id: str
    name: str = Field(description="Display name of the model")


class _GenerationResponse(BaseModel):
    model: ModelRef
    processing_time: int = Field(description="Simulated processing time in milliseconds")
    credits_used: int
    credits_remaining: int


class TextGenerationResponse(_GenerationResponse):
    text: str


class ImageGenerationResponse(_GenerationResponse):
    image_url: str
    prompt: str


class AudioGenerationResponse(_GenerationResponse):
    audio_url: str
    duration: float = Field(description="Length of the generated clip in seconds")
    prompt: str


class CreditsResponse(BaseModel):
    credits: int
    message: Optional[str] = None


class PurchaseCreditsRequest(BaseModel):
    amount: Optional[int] = None
