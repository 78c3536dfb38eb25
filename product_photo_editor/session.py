import logging
from typing import List, Optional

from .errors import BusyError, RefinementError, StudioError, TransportError
from .history import HistoryController
from .models import GenerationRequest, HistoryBatch, ResultEntry
from .orchestrator import Orchestrator

logger = logging.getLogger(__name__)

REFINE_FAILED = "No se pudo refinar la imagen."
UNEXPECTED_ERROR = "Ocurrió un error inesperado."


class StudioSession:
    """Estado de la sesión del editor: resultados, historial, último error y busy.

    Una sola operación contra Gemini por vez; mientras hay una en curso las
    demás se rechazan con BusyError.
    """

    def __init__(self, orchestrator: Orchestrator):
        self.orchestrator = orchestrator
        self.history = HistoryController(orchestrator)
        self.busy = False
        self.last_error: Optional[str] = None

    @property
    def results(self) -> List[ResultEntry]:
        return self.history.results

    @property
    def batches(self) -> List[HistoryBatch]:
        return self.history.batches

    def _reject_if_busy(self) -> None:
        if self.busy:
            logger.info("rejected: operation already in flight")
            raise BusyError("Ya hay una operación en curso")

    def _claim(self) -> None:
        self._reject_if_busy()
        self.busy = True

    async def generate(self, req: GenerationRequest) -> List[ResultEntry]:
        self._claim()
        self.last_error = None
        self.history.clear()
        try:
            images = await self.orchestrator.generate(req)
            entries = self.history.create(images)
            if entries:
                self.history.record_batch(entries)
            return entries
        except StudioError as e:
            self.last_error = e.detail
            raise
        except Exception:
            logger.exception("generate failed")
            self.last_error = UNEXPECTED_ERROR
            raise
        finally:
            self.busy = False

    async def refine(self, entry_id: str, instruction: str) -> Optional[ResultEntry]:
        self._claim()
        try:
            return await self.history.refine(entry_id, instruction)
        except (TransportError, RefinementError) as e:
            logger.warning("refine failed entry=%s: %s", entry_id, e.detail)
            self.last_error = REFINE_FAILED
            raise
        except StudioError as e:
            self.last_error = e.detail
            raise
        except Exception:
            logger.exception("refine failed entry=%s", entry_id)
            self.last_error = REFINE_FAILED
            raise
        finally:
            self.busy = False

    # undo/redo/select cambian la versión activa: no mientras hay un refine en vuelo
    def undo(self, entry_id: str) -> Optional[ResultEntry]:
        self._reject_if_busy()
        return self.history.undo(entry_id)

    def redo(self, entry_id: str) -> Optional[ResultEntry]:
        self._reject_if_busy()
        return self.history.redo(entry_id)

    def set_pending_instruction(self, entry_id: str, text: str) -> Optional[ResultEntry]:
        return self.history.set_pending_instruction(entry_id, text)

    def select_batch(self, batch_id: str) -> Optional[HistoryBatch]:
        self._reject_if_busy()
        return self.history.select_batch(batch_id)
