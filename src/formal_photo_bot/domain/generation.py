"""Models for image generation results."""

from pydantic import BaseModel, model_validator


class GeneratedImage(BaseModel):
    """Single image returned by the generation API."""

    url: str | None = None
    b64_json: str | None = None

    @model_validator(mode="after")
    def _require_payload(self) -> "GeneratedImage":
        if not self.url and not self.b64_json:
            raise ValueError("generated image has neither url nor b64_json")
        return self


class GenerationResult(BaseModel):
    """Structured output of an image edit call."""

    data: list[GeneratedImage]

    @model_validator(mode="after")
    def _require_image(self) -> "GenerationResult":
        if not self.data:
            raise ValueError("generation returned no images")
        return self
