import logging
from typing import Any, List, Optional, Sequence

import httpx
from google import genai
from google.genai import errors, types

from .config import Settings
from .errors import ConfigurationError, TransportError
from .images import ImageAsset

logger = logging.getLogger(__name__)


def extract_image(resp) -> Optional[ImageAsset]:
    """Primer part con inline_data del primer candidate, o None si no vino imagen."""
    if not getattr(resp, "candidates", None):
        return None

    content = getattr(resp.candidates[0], "content", None)
    for part in (getattr(content, "parts", None) or []):
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return ImageAsset(data=inline.data, mime_type=inline.mime_type or "image/png")
    return None


class GeminiImageClient:
    """Envoltorio mínimo sobre google-genai para el modelo de imagen.

    El genai.Client se construye recién en la primera llamada, así la app
    levanta aunque falte la API key (y responde 500 al usarla, como antes).
    """

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.settings.api_key:
                raise ConfigurationError("GEMINI_API_KEY no configurada")
            self._client = genai.Client(api_key=self.settings.api_key)
        return self._client

    async def generate_image(self, images: Sequence[ImageAsset], instruction: str) -> Optional[ImageAsset]:
        client = self._get_client()

        contents: List[Any] = [
            types.Part.from_bytes(data=img.data, mime_type=img.mime_type) for img in images
        ]
        contents.append(instruction)

        try:
            resp = await client.aio.models.generate_content(
                model=self.settings.image_model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
            )
        except errors.APIError as e:
            logger.error("Gemini API error code=%s: %s", e.code, e.message)
            raise TransportError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error("Gemini transport error: %s", e)
            raise TransportError(str(e)) from e

        return extract_image(resp)
