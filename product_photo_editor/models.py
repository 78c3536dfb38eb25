import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .images import ImageAsset

NO_THEME = "None"

THEMES = ["None", "Studio", "Luxury", "Urban", "Tropical", "Beach", "Minimalist", "Vintage", "Nature"]
DEFAULT_THEME = "Studio"


# ===================== MODOS DE GENERACIÓN =====================

@dataclass(frozen=True)
class ReferenceMode:
    reference: ImageAsset


@dataclass(frozen=True)
class ModelMode:
    model: ImageAsset


@dataclass(frozen=True)
class ProductOnlyMode:
    pass


GenerationMode = Union[ReferenceMode, ModelMode, ProductOnlyMode]


class GenerationRequest(BaseModel):
    product_image: Optional[ImageAsset] = None
    model_image: Optional[ImageAsset] = None
    reference_image: Optional[ImageAsset] = None
    theme: str = DEFAULT_THEME
    custom_theme: str = ""
    extra_instructions: str = ""

    def mode(self) -> GenerationMode:
        # referencia > modelo > solo producto
        if self.reference_image is not None:
            return ReferenceMode(reference=self.reference_image)
        if self.model_image is not None:
            return ModelMode(model=self.model_image)
        return ProductOnlyMode()

    def effective_theme(self) -> str:
        if self.theme == NO_THEME:
            return (self.custom_theme or "").strip()
        return (self.theme or "").strip()


# ===================== HISTORIAL =====================

def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class ResultEntry(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("result"))
    versions: List[ImageAsset]
    active_index: int = 0
    pending_instruction: str = ""

    @property
    def active(self) -> ImageAsset:
        return self.versions[self.active_index]

    @property
    def can_undo(self) -> bool:
        return self.active_index > 0

    @property
    def can_redo(self) -> bool:
        return self.active_index < len(self.versions) - 1

    def snapshot(self) -> "ResultEntry":
        # las ImageAsset son inmutables: alcanza con copiar la lista
        return ResultEntry(
            id=self.id,
            versions=list(self.versions),
            active_index=self.active_index,
            pending_instruction=self.pending_instruction,
        )


class HistoryBatch(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("history"))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    entries: List[ResultEntry]
