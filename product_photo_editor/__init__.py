from .errors import BusyError, ConfigurationError, RefinementError, StudioError, TransportError, ValidationError
from .images import ImageAsset
from .models import GenerationRequest, HistoryBatch, ResultEntry

__all__ = [
    "BusyError",
    "ConfigurationError",
    "GenerationRequest",
    "HistoryBatch",
    "ImageAsset",
    "RefinementError",
    "ResultEntry",
    "StudioError",
    "TransportError",
    "ValidationError",
]
