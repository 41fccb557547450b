"""Error types raised by the statement generation path."""

from __future__ import annotations

__all__ = [
    "FILE_EXISTS_TOKEN",
    "StatementDeskError",
    "ConfigurationError",
    "NoDataError",
    "StatementConflictError",
    "StatementRenderError",
    "GenerationBusyError",
    "classify_render_failure",
]

# Marker the render service puts in its error text when the target file exists.
FILE_EXISTS_TOKEN = "FILE_EXISTS"


class StatementDeskError(RuntimeError):
    """Base class for StatementDesk failures."""


class ConfigurationError(StatementDeskError):
    """Raised when no output folder is configured."""


class NoDataError(StatementDeskError):
    """Raised when the selected customer/month holds no records."""


class StatementRenderError(StatementDeskError):
    """Raised when the render service fails for any reason other than a conflict."""


class StatementConflictError(StatementRenderError):
    """Raised when the statement file already exists and overwrite was not requested."""


class GenerationBusyError(StatementDeskError):
    """Raised when a generation is requested while another is still running."""


def _stringify(error: object) -> str:
    if isinstance(error, str):
        return error
    text = str(error)
    return text if text else repr(error)


def classify_render_failure(error: object) -> StatementRenderError:
    """Map a raw render-service failure onto a structured error."""

    if isinstance(error, StatementRenderError):
        return error

    message = _stringify(error)
    if FILE_EXISTS_TOKEN in message:
        return StatementConflictError(message)
    return StatementRenderError(message)
