"""Formal photo generation using an image-editing API."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from formal_photo_bot.adapters.telegram_file_client import TelegramFileClient
from formal_photo_bot.domain.generation import GenerationResult
from formal_photo_bot.domain.outcomes import ErrorKind, GenerationError
from formal_photo_bot.domain.sessions import PromptParameters

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "professional ID photo, half-body portrait, {clothing_type} {clothing_color}, "
    "{background_color} solid background, studio lighting, natural skin tone, "
    "sharp focus on face, photorealistic, high quality, corporate headshot style, "
    "exact same face, preserve facial features, identical face structure, "
    "maintain body proportions, realistic body size, natural physique, "
    "professional studio lighting, soft shadows, even illumination"
)

AVOID_TERMS = (
    "cartoon, illustration, painting, drawing, sketch, anime, 3d render, "
    "distorted face, deformed, blurry, duplicate, multiple people, watermark, "
    "text, cropped, low quality, jpeg artifacts, extra limbs, missing limbs, "
    "malformed hands, long neck, bad anatomy, bad proportions, cloned face, "
    "pattern background, patterned clothing, logo, stripes, texture, "
    "gradient background, objects in background"
)


class ImageClient(Protocol):
    """Interface for image-editing APIs."""

    async def edit(
        self,
        *,
        model: str,
        size: str,
        image: bytes,
        mime_type: str,
        prompt: str,
    ) -> dict[str, object]:
        """Return the raw edit response with a ``data`` list."""


class ImageHost(Protocol):
    """Interface for publishing generated images."""

    def upload(self, content: bytes, content_type: str) -> str:
        """Store image bytes and return a public URL."""


@dataclass
class ImageGenerationService:
    """Turns a Telegram photo into a formal portrait."""

    client: ImageClient
    file_client: TelegramFileClient
    image_host: ImageHost
    model: str
    size: str

    async def generate(self, photo_ref: str, parameters: PromptParameters) -> str:
        """Generate a portrait for ``photo_ref`` and return the output URL.

        Raises GenerationError with AI_ERROR for any failure of the
        download, the API call or the result format.
        """
        try:
            image_bytes = await self.file_client.download_file_bytes(photo_ref)
        except Exception as exc:
            logger.exception("Failed to download source photo")
            raise GenerationError(ErrorKind.AI_ERROR, "photo download failed") from exc

        prompt = build_prompt(parameters)
        logger.info(
            "Starting image generation",
            extra={"photo_ref": photo_ref, "parameters": parameters.model_dump()},
        )
        try:
            raw = await self.client.edit(
                model=self.model,
                size=self.size,
                image=image_bytes,
                mime_type=_detect_mime_type(image_bytes),
                prompt=prompt,
            )
        except TimeoutError as exc:
            raise GenerationError(ErrorKind.TIMEOUT_ERROR, str(exc)) from exc
        except Exception as exc:
            logger.exception("Image generation request failed")
            raise GenerationError(ErrorKind.AI_ERROR, str(exc)) from exc

        try:
            result = GenerationResult.model_validate(raw)
        except ValidationError as exc:
            logger.error("Malformed generation result", extra={"error": str(exc)})
            raise GenerationError(ErrorKind.AI_ERROR, "malformed result") from exc

        image = result.data[0]
        if image.url:
            return image.url
        try:
            content = base64.b64decode(image.b64_json or "", validate=True)
            # The storage SDK is synchronous; keep it off the event loop.
            return await asyncio.to_thread(
                self.image_host.upload, content, _detect_mime_type(content)
            )
        except Exception as exc:
            logger.exception("Failed to publish generated image")
            raise GenerationError(ErrorKind.AI_ERROR, "upload failed") from exc


def build_prompt(parameters: PromptParameters) -> str:
    """Build the edit prompt for the given parameters."""
    prompt = PROMPT_TEMPLATE.format(**parameters.model_dump())
    return f"{prompt}. Avoid: {AVOID_TERMS}."


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
