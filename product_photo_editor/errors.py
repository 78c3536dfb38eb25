"""Errores del editor. Cada uno lleva el status HTTP con el que se responde."""


class StudioError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(StudioError):
    """Precondición violada (foto faltante, upload inválido, instrucción vacía)."""

    status_code = 400


class ConfigurationError(StudioError):
    status_code = 500


class BusyError(StudioError):
    """Ya hay una generación o un refinamiento en curso."""

    status_code = 409


class TransportError(StudioError):
    """La llamada a Gemini falló (red, auth, cuota)."""

    status_code = 502


class RefinementError(StudioError):
    """Gemini respondió pero sin imagen al refinar."""

    status_code = 502
