import base64

from pydantic import BaseModel, ConfigDict

ALLOWED_EXTENSIONS = ["png", "jpg", "jpeg", "webp"]


def mime_for_extension(ext: str) -> str:
    ext = (ext or "").lower().replace(".", "")
    return "image/jpeg" if ext in ["jpg", "jpeg"] else f"image/{ext}"


def extension_for_mime(mime: str) -> str:
    mime = (mime or "").lower()
    if "png" in mime:
        return "png"
    if "webp" in mime:
        return "webp"
    return "jpeg"


class ImageAsset(BaseModel):
    """Imagen codificada e inmutable: bytes + media type."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "image/png"

    def to_data_url(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"

    def __repr__(self) -> str:
        return f"ImageAsset(mime_type={self.mime_type!r}, size={len(self.data)})"
