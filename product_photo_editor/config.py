import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


class Settings(BaseModel):
    api_key: Optional[str] = None
    image_model: str = DEFAULT_IMAGE_MODEL
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS
        return cls(
            # API_KEY es el nombre que usaba el front original
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            image_model=os.getenv("GEMINI_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
            host=os.getenv("HOST") or "127.0.0.1",
            port=int(os.getenv("PORT") or 8000),
        )
