import logging
from typing import List, Optional

from .errors import ValidationError
from .images import ImageAsset
from .models import HistoryBatch, ResultEntry
from .orchestrator import Orchestrator

logger = logging.getLogger(__name__)


class HistoryController:
    """Resultados actuales (cada uno con su pila undo/redo) + lista de batches.

    Todo vive en memoria durante la vida del proceso. Los batches guardan
    copias independientes: refinar un resultado actual no altera el historial.
    """

    def __init__(self, orchestrator: Orchestrator):
        self.orchestrator = orchestrator
        self.results: List[ResultEntry] = []
        self.batches: List[HistoryBatch] = []

    def get(self, entry_id: str) -> Optional[ResultEntry]:
        for entry in self.results:
            if entry.id == entry_id:
                return entry
        return None

    def get_batch(self, batch_id: str) -> Optional[HistoryBatch]:
        for batch in self.batches:
            if batch.id == batch_id:
                return batch
        return None

    def clear(self) -> None:
        self.results = []

    def create(self, images: List[ImageAsset]) -> List[ResultEntry]:
        self.results = [ResultEntry(versions=[img]) for img in images]
        return self.results

    async def refine(self, entry_id: str, instruction: str) -> Optional[ResultEntry]:
        entry = self.get(entry_id)
        if entry is None:
            return None
        if not (instruction or "").strip():
            raise ValidationError("La instrucción de refinamiento está vacía")

        base_index = entry.active_index
        new_image = await self.orchestrator.refine(entry.versions[base_index], instruction)

        # descarta la rama de redo (undo/redo lineal) a partir de la versión refinada
        entry.versions = entry.versions[: base_index + 1] + [new_image]
        entry.active_index = len(entry.versions) - 1
        entry.pending_instruction = ""
        return entry

    def undo(self, entry_id: str) -> Optional[ResultEntry]:
        entry = self.get(entry_id)
        if entry is not None:
            entry.active_index = max(0, entry.active_index - 1)
        return entry

    def redo(self, entry_id: str) -> Optional[ResultEntry]:
        entry = self.get(entry_id)
        if entry is not None:
            entry.active_index = min(len(entry.versions) - 1, entry.active_index + 1)
        return entry

    def set_pending_instruction(self, entry_id: str, text: str) -> Optional[ResultEntry]:
        entry = self.get(entry_id)
        if entry is not None:
            entry.pending_instruction = text
        return entry

    def record_batch(self, entries: List[ResultEntry]) -> HistoryBatch:
        batch = HistoryBatch(entries=[e.snapshot() for e in entries])
        self.batches.insert(0, batch)
        logger.info("history batch=%s entries=%d total_batches=%d", batch.id, len(batch.entries), len(self.batches))
        return batch

    def select_batch(self, batch_id: str) -> Optional[HistoryBatch]:
        batch = self.get_batch(batch_id)
        if batch is not None:
            self.results = [e.snapshot() for e in batch.entries]
        return batch
