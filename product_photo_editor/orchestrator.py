import asyncio
import logging
from typing import List, Optional

from .errors import RefinementError, TransportError, ValidationError
from .gemini import GeminiImageClient
from .images import ImageAsset
from .models import GenerationRequest, ModelMode, ReferenceMode
from .prompts import build_instruction

logger = logging.getLogger(__name__)

NUM_VARIATIONS = 4


class Orchestrator:
    """Arma el prompt según las fotos recibidas y dispara las llamadas a Gemini.

    No guarda estado entre llamadas. El cliente se inyecta desde create_app().
    """

    def __init__(self, client: GeminiImageClient, variations: int = NUM_VARIATIONS):
        self.client = client
        self.variations = variations

    async def generate(self, req: GenerationRequest) -> List[ImageAsset]:
        if req.product_image is None:
            raise ValidationError("Se requiere la foto del producto")

        mode = req.mode()
        instruction = build_instruction(req, mode)

        if isinstance(mode, ReferenceMode):
            logger.info("generate mode=reference calls=1")
            image = await self.client.generate_image([req.product_image, mode.reference], instruction)
            return [image] if image is not None else []

        if isinstance(mode, ModelMode):
            parts = [req.product_image, mode.model]
            mode_name = "model"
        else:
            parts = [req.product_image]
            mode_name = "product"

        logger.info("generate mode=%s calls=%d", mode_name, self.variations)
        return await self._fan_out(parts, instruction)

    async def _fan_out(self, parts: List[ImageAsset], instruction: str) -> List[ImageAsset]:
        # mismas entradas en todas las llamadas: la variación la pone el modelo
        outcomes = await asyncio.gather(
            *[self.client.generate_image(parts, instruction) for _ in range(self.variations)],
            return_exceptions=True,
        )

        images: List[ImageAsset] = []
        failures: List[TransportError] = []
        for i, outcome in enumerate(outcomes):
            if isinstance(outcome, TransportError):
                logger.warning("generate call %d failed: %s", i + 1, outcome.detail)
                failures.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome is None:
                logger.warning("generate call %d returned no image", i + 1)
            else:
                images.append(outcome)

        # sin ninguna imagen, el error de transporte se informa tal cual
        if failures and not images:
            raise failures[0]
        return images

    async def refine(self, current: ImageAsset, instruction: str) -> ImageAsset:
        image: Optional[ImageAsset] = await self.client.generate_image([current], instruction)
        if image is None:
            raise RefinementError("Gemini no devolvió imagen al refinar")
        return image
