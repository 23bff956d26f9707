"""OpenAI Images API client for portrait edits."""

from dataclasses import dataclass

from openai import APITimeoutError, AsyncOpenAI

from formal_photo_bot.services.generation import ImageClient


@dataclass
class OpenAIImageClient(ImageClient):
    """Image client backed by the OpenAI-compatible images edit endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, base_url: str | None = None
    ) -> "OpenAIImageClient":
        """Create an image client, optionally against a compatible provider."""
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def edit(
        self,
        *,
        model: str,
        size: str,
        image: bytes,
        mime_type: str,
        prompt: str,
    ) -> dict[str, object]:
        """Call images.edit and return the response as a plain dict."""
        extension = mime_type.split("/")[-1]
        try:
            response = await self.client.images.edit(
                model=model,
                image=(f"photo.{extension}", image, mime_type),
                prompt=prompt,
                size=size,
                n=1,
            )
        except APITimeoutError as exc:
            raise TimeoutError("Image edit request timed out") from exc
        return response.model_dump()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
