"""
EdAiVi Studio Backend: Demo Seed Data
=====================================

What:  Populates a fresh store with an admin account, the three starter AI
       models and one public demo audio project.
When:  Called by `create_app()` when `settings.seed_demo_data` is on.

Seed documents use fixed ids (admin, model1, model2, model3, project1) so
clients and tests can address them directly. Seeding is idempotent: ids
that already exist are left alone.
"""

import logging

from studio.config import settings
from studio.database import Store
from studio.models import AIModel, AudioProject, AudioTrack, User
from studio.models.ai_model import Parameter, Restrictions
from studio.models.user import Subscription, Usage
from studio.security import hash_password

logger = logging.getLogger(__name__)

ADMIN_CREDITS = 1000
SEED_ADMIN_ID = "admin"


def starter_models() -> list:
    return [
        AIModel(
            id="model1",
            name="text-gen-basic",
            display_name="TextGen Basic",
            description="Basic text generation model for general purpose use",
            type="text-generation",
            category="text",
            tags=["text", "generation", "basic"],
            is_featured=True,
            default_parameters=[
                Parameter(name="temperature", display_name="Temperature", type="number",
                          default_value=0.7, min_value=0.1, max_value=1.0, step=0.1),
                Parameter(name="max_tokens", display_name="Max Tokens", type="number",
                          default_value=256, min_value=1, max_value=4096, step=1),
            ],
            input_formats=["text/plain"],
            output_formats=["text/plain"],
            cost_per_use=0.01,
            credits_per_use=1,
            restrictions=Restrictions(min_user_level="free", max_daily_uses=50),
        ),
        AIModel(
            id="model2",
            name="image-gen-basic",
            display_name="ImageGen Basic",
            description="Basic image generation model for creating images from text descriptions",
            type="image-generation",
            category="image",
            tags=["image", "generation", "basic"],
            is_featured=True,
            default_parameters=[
                Parameter(name="width", display_name="Width", type="number",
                          default_value=512, min_value=256, max_value=1024, step=64),
                Parameter(name="height", display_name="Height", type="number",
                          default_value=512, min_value=256, max_value=1024, step=64),
            ],
            input_formats=["text/plain"],
            output_formats=["image/jpeg", "image/png"],
            cost_per_use=0.02,
            credits_per_use=2,
            restrictions=Restrictions(min_user_level="free", max_daily_uses=20),
        ),
        AIModel(
            id="model3",
            name="tts-basic",
            display_name="Text-to-Speech Basic",
            description="Basic text-to-speech model for converting text to natural-sounding speech",
            type="text-to-speech",
            category="audio",
            tags=["audio", "speech", "tts", "basic"],
            is_featured=True,
            default_parameters=[
                Parameter(name="voice", display_name="Voice", type="enum", default_value="female-1",
                          options=["female-1", "female-2", "male-1", "male-2"]),
                Parameter(name="speed", display_name="Speed", type="number",
                          default_value=1.0, min_value=0.5, max_value=2.0, step=0.1),
            ],
            input_formats=["text/plain"],
            output_formats=["audio/mpeg"],
            cost_per_use=0.01,
            credits_per_use=1,
            restrictions=Restrictions(min_user_level="free", max_daily_uses=30),
        ),
    ]


def seed_store(store: Store) -> None:
    """Preload the demo documents. Safe to call more than once."""
    admin = User(
        id=SEED_ADMIN_ID,
        email=settings.admin_email.strip().lower(),
        password_hash=hash_password(settings.admin_password),
        display_name="Admin",
        role="admin",
        is_verified=True,
        subscription=Subscription(plan="enterprise"),
        usage=Usage(ai_credits=ADMIN_CREDITS),
    )
    store.users.preload(admin)
    store.ai_models.preload(*starter_models())

    demo = AudioProject(
        id="project1",
        owner_id=SEED_ADMIN_ID,
        title="Demo Project",
        description="A public demo mix to explore the editor",
        is_public=True,
        tags=["demo"],
    )
    demo.add_track(AudioTrack(
        name="Demo Beat",
        type="beat",
        file_url=f"{settings.media_base_url}/demo/beat.mp3",
        duration=30.0,
    ))
    store.audio_projects.preload(demo)

    logger.info("Seed data ready: %s", store.stats())
