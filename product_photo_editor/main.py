import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .config import Settings
from .errors import StudioError, ValidationError
from .gemini import GeminiImageClient
from .images import ALLOWED_EXTENSIONS, ImageAsset, extension_for_mime, mime_for_extension
from .models import DEFAULT_THEME, THEMES, GenerationRequest, HistoryBatch, ResultEntry
from .orchestrator import Orchestrator
from .session import StudioSession

logger = logging.getLogger(__name__)


class RefineBody(BaseModel):
    instruction: str = ""


class InstructionBody(BaseModel):
    text: str = ""


# ===================== HELPERS =====================

async def _read_upload(file: Optional[UploadFile], label: str) -> Optional[ImageAsset]:
    if file is None or not file.filename:
        return None

    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationError(f"{label}: debe ser imagen")

    ext = file.filename.split(".")[-1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"{label}: formato no soportado")

    raw = await file.read()
    if not raw:
        raise ValidationError(f"{label}: archivo vacío")

    return ImageAsset(data=raw, mime_type=mime_for_extension(ext))


def _entry_out(entry: ResultEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "image": entry.active.to_data_url(),
        "active_index": entry.active_index,
        "versions": len(entry.versions),
        "can_undo": entry.can_undo,
        "can_redo": entry.can_redo,
        "pending_instruction": entry.pending_instruction,
    }


def _batch_out(batch: HistoryBatch) -> Dict[str, Any]:
    return {
        "id": batch.id,
        "created_at": batch.created_at.isoformat(),
        "thumbnails": [e.active.to_data_url() for e in batch.entries],
    }


def _session(request: Request) -> StudioSession:
    return request.app.state.session


def _entry_or_404(session: StudioSession, entry_id: str) -> ResultEntry:
    entry = session.history.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Resultado no encontrado")
    return entry


# ===================== APP =====================

def create_app(settings: Optional[Settings] = None, image_client: Optional[GeminiImageClient] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="AI Product Photo Editor")

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    client = image_client or GeminiImageClient(settings)
    app.state.settings = settings
    app.state.session = StudioSession(Orchestrator(client))

    @app.exception_handler(StudioError)
    async def studio_error_handler(request: Request, exc: StudioError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.get("/")
    def home():
        return {"ok": True}

    @app.get("/options")
    def get_options():
        return {
            "themes": THEMES,
            "default_theme": DEFAULT_THEME,
            "image_types": [mime_for_extension(ext) for ext in ["png", "jpg", "webp"]],
        }

    @app.get("/state")
    def get_state(session: StudioSession = Depends(_session)):
        return {"busy": session.busy, "last_error": session.last_error}

    @app.post("/generate")
    async def generate(
        product: Optional[UploadFile] = File(None),
        model: Optional[UploadFile] = File(None),
        reference: Optional[UploadFile] = File(None),
        theme: str = Form(DEFAULT_THEME),
        custom_theme: str = Form(""),
        extra_instructions: str = Form(""),
        session: StudioSession = Depends(_session),
    ):
        try:
            product_image = await _read_upload(product, "Foto del producto")
            model_image = await _read_upload(model, "Foto de modelo")
            reference_image = await _read_upload(reference, "Foto de referencia")
        except ValidationError as e:
            session.last_error = e.detail
            raise

        if model_image is not None and reference_image is not None:
            logger.warning("model and reference both uploaded, using reference")
            model_image = None

        req = GenerationRequest(
            product_image=product_image,
            model_image=model_image,
            reference_image=reference_image,
            theme=theme,
            custom_theme=custom_theme,
            extra_instructions=extra_instructions,
        )
        entries = await session.generate(req)
        return {"ok": True, "results": [_entry_out(e) for e in entries]}

    @app.get("/results")
    def list_results(session: StudioSession = Depends(_session)):
        return {"results": [_entry_out(e) for e in session.results]}

    @app.post("/results/{entry_id}/refine")
    async def refine_result(entry_id: str, body: RefineBody, session: StudioSession = Depends(_session)):
        entry = _entry_or_404(session, entry_id)
        instruction = body.instruction if body.instruction.strip() else entry.pending_instruction
        entry = await session.refine(entry_id, instruction)
        return {"ok": True, "result": _entry_out(entry)}

    @app.post("/results/{entry_id}/undo")
    def undo_result(entry_id: str, session: StudioSession = Depends(_session)):
        _entry_or_404(session, entry_id)
        return {"ok": True, "result": _entry_out(session.undo(entry_id))}

    @app.post("/results/{entry_id}/redo")
    def redo_result(entry_id: str, session: StudioSession = Depends(_session)):
        _entry_or_404(session, entry_id)
        return {"ok": True, "result": _entry_out(session.redo(entry_id))}

    @app.put("/results/{entry_id}/instruction")
    def set_instruction(entry_id: str, body: InstructionBody, session: StudioSession = Depends(_session)):
        _entry_or_404(session, entry_id)
        return {"ok": True, "result": _entry_out(session.set_pending_instruction(entry_id, body.text))}

    @app.get("/results/{entry_id}/image")
    def get_result_image(entry_id: str, download: bool = False, session: StudioSession = Depends(_session)):
        entry = _entry_or_404(session, entry_id)
        image = entry.active
        headers = {}
        if download:
            n = session.results.index(entry) + 1
            filename = f"generated-photo-{n}.{extension_for_mime(image.mime_type)}"
            headers["Content-Disposition"] = f'attachment; filename="{filename}"'
        return Response(image.data, media_type=image.mime_type, headers=headers)

    @app.get("/history")
    def list_history(session: StudioSession = Depends(_session)):
        return {"history": [_batch_out(b) for b in session.batches]}

    @app.post("/history/{batch_id}/select")
    def select_history(batch_id: str, session: StudioSession = Depends(_session)):
        if session.select_batch(batch_id) is None:
            raise HTTPException(status_code=404, detail="Historial no encontrado")
        return {"ok": True, "results": [_entry_out(e) for e in session.results]}

    return app


def run() -> None:
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
