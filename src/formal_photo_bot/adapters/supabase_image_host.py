"""Supabase Storage host for generated images."""

from dataclasses import dataclass
from uuid import uuid4

from supabase import Client

from formal_photo_bot.services.generation import ImageHost

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


@dataclass
class SupabaseImageHost(ImageHost):
    """Uploads generated images to a public Supabase bucket."""

    client: Client
    bucket: str

    def upload(self, content: bytes, content_type: str) -> str:
        """Upload image bytes and return their public URL."""
        extension = _EXTENSIONS.get(content_type, "jpg")
        path = f"generated/{uuid4()}.{extension}"
        storage = self.client.storage.from_(self.bucket)
        storage.upload(path, content, {"content-type": content_type})
        return storage.get_public_url(path)
