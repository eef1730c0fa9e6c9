"""
Renderer registry and export service.

Maps each ExportFormat to exactly one renderer and wraps rendering with the
bookkeeping an export needs: a fresh export id, the derived version code and
shuffle seed, a timestamped filename prefix, and a completion log line.
"""

import logging
import shutil
import time
import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, NamedTuple, Optional

from quizexport.docx_export import DOCX_MIME_TYPE, export_docx
from quizexport.errors import ExportRenderError, UnsupportedExportFormatError
from quizexport.html_export import HTML_MIME_TYPE, export_html
from quizexport.json_export import JSON_MIME_TYPE, export_json
from quizexport.models import (
    ExportFile,
    ExportFormat,
    ExportPayload,
    PrintOptions,
    QuizExportDto,
    derive_shuffle_seed,
    derive_version_code,
)
from quizexport.pdf_export import PDF_MIME_TYPE, export_pdf
from quizexport.xlsx_export import XLSX_MIME_TYPE, export_xlsx

logger = logging.getLogger(__name__)


class Renderer(NamedTuple):
    render: Callable[..., ExportFile]
    extension: str
    mime_type: str


RENDERERS: Dict[ExportFormat, Renderer] = {
    ExportFormat.HTML_PRINT: Renderer(export_html, "html", HTML_MIME_TYPE),
    ExportFormat.PDF_PRINT: Renderer(export_pdf, "pdf", PDF_MIME_TYPE),
    ExportFormat.XLSX_EDITABLE: Renderer(export_xlsx, "xlsx", XLSX_MIME_TYPE),
    ExportFormat.JSON_EDITABLE: Renderer(export_json, "json", JSON_MIME_TYPE),
    ExportFormat.DOCX_PRINT: Renderer(export_docx, "docx", DOCX_MIME_TYPE),
}

# Short names accepted on the command line
FORMAT_ALIASES = {
    "html": ExportFormat.HTML_PRINT,
    "pdf": ExportFormat.PDF_PRINT,
    "xlsx": ExportFormat.XLSX_EDITABLE,
    "json": ExportFormat.JSON_EDITABLE,
    "docx": ExportFormat.DOCX_PRINT,
}


def resolve_format(fmt) -> ExportFormat:
    """Turn an ExportFormat, its value, or a short alias into an ExportFormat.

    Raises:
        UnsupportedExportFormatError: If the value names no known format.
    """
    if isinstance(fmt, ExportFormat):
        return fmt
    if isinstance(fmt, str):
        key = fmt.strip()
        if key.lower() in FORMAT_ALIASES:
            return FORMAT_ALIASES[key.lower()]
        try:
            return ExportFormat(key.upper())
        except ValueError:
            pass
    raise UnsupportedExportFormatError(fmt)


def get_renderer(fmt, registry: Optional[Dict[ExportFormat, Renderer]] = None) -> Renderer:
    """Look up the renderer for a format.

    Raises:
        UnsupportedExportFormatError: If nothing is registered for it.
    """
    registry = RENDERERS if registry is None else registry
    export_format = resolve_format(fmt)
    try:
        return registry[export_format]
    except KeyError:
        raise UnsupportedExportFormatError(fmt) from None


def render_export(
    payload: ExportPayload,
    fmt,
    config: Optional[dict] = None,
    registry: Optional[Dict[ExportFormat, Renderer]] = None,
) -> ExportFile:
    """Render a payload with the renderer registered for ``fmt``."""
    renderer = get_renderer(fmt, registry)
    return renderer.render(payload, config)


def build_filename_prefix(
    scope: Optional[str] = None,
    now: Optional[datetime] = None,
    quiz_ids: Optional[Iterable] = None,
    category_ids: Optional[Iterable] = None,
    tags: Optional[Iterable] = None,
    difficulty=None,
    search: Optional[str] = None,
) -> str:
    """Build ``quizzes_{scope}_{yyyyMMddHHmm}`` plus a compact filter summary.

    Example: ``quizzes_me_202601151030_ids3_tag2_easy_search``.
    """
    now = now or datetime.now()
    prefix = f"quizzes_{scope or 'public'}_{now.strftime('%Y%m%d%H%M')}"
    quiz_ids, category_ids, tags = list(quiz_ids or []), list(category_ids or []), list(tags or [])
    if quiz_ids:
        prefix += f"_ids{len(quiz_ids)}"
    if category_ids:
        prefix += f"_cat{len(category_ids)}"
    if tags:
        prefix += f"_tag{len(tags)}"
    if difficulty is not None:
        value = getattr(difficulty, "value", difficulty)
        prefix += f"_{str(value).lower()}"
    if search and search.strip():
        prefix += "_search"
    return prefix


def _sort_key(quiz: QuizExportDto):
    created = quiz.created_at.timestamp() if quiz.created_at is not None else float("inf")
    return (created, quiz.id)


def export_quizzes(
    quizzes: Iterable[QuizExportDto],
    fmt,
    print_options: Optional[PrintOptions] = None,
    scope: Optional[str] = None,
    now: Optional[datetime] = None,
    config: Optional[dict] = None,
    **filters,
) -> ExportFile:
    """Export a quiz collection end to end.

    Quizzes are ordered by creation time then id for stable output. A new
    export id is generated per call; the version code and shuffle seed are
    derived from it.

    Args:
        quizzes: Quizzes to export.
        fmt: ExportFormat, its value, or a short alias such as "pdf".
        print_options: Print flags; PrintOptions.defaults() when omitted.
        scope: Scope name used in the filename prefix.
        now: Timestamp for the filename prefix (defaults to now).
        config: Loaded configuration passed through to the renderer.
        **filters: quiz_ids, category_ids, tags, difficulty, search for the
            filename summary.

    Returns:
        The rendered ExportFile.

    Raises:
        UnsupportedExportFormatError: Before any rendering, for an unknown format.
        ExportRenderError: If the document library fails.
    """
    start = time.monotonic()
    renderer = get_renderer(fmt)
    export_format = resolve_format(fmt)

    export_id = uuid.uuid4()
    version_code = derive_version_code(export_id)
    payload = ExportPayload(
        quizzes=sorted(quizzes, key=_sort_key),
        print_options=print_options or PrintOptions.defaults(),
        filename_prefix=build_filename_prefix(scope, now, **filters),
        export_id=export_id,
        version_code=version_code,
        shuffle_seed=derive_shuffle_seed(export_id),
    )
    result = renderer.render(payload, config)

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "Quiz export completed: scope=%s, format=%s, quizCount=%d, exportId=%s, versionCode=%s, durationMs=%d",
        scope or "public", export_format.value, len(payload.quizzes), export_id, version_code, duration_ms,
    )
    return result


def stream_export(output, quizzes: Iterable[QuizExportDto], fmt, **kwargs) -> ExportFile:
    """Export and copy the bytes into a writable binary stream.

    Raises:
        ExportRenderError: If copying to ``output`` fails.
    """
    export_file = export_quizzes(quizzes, fmt, **kwargs)
    try:
        with export_file.open() as stream:
            shutil.copyfileobj(stream, output)
    except OSError as e:
        logger.error("stream_export: failed streaming %s: %s", export_file.filename, e)
        raise ExportRenderError("Failed streaming export") from e
    return export_file
