"""
Exception types raised by the export engine.
"""


class ExportError(Exception):
    """Base class for export failures."""


class UnsupportedExportFormatError(ExportError, ValueError):
    """No renderer is registered for the requested export format."""

    def __init__(self, fmt):
        self.format = fmt
        super().__init__(f"No renderer registered for export format: {fmt}")


class ExportRenderError(ExportError, RuntimeError):
    """A document library failed while producing the output bytes."""
