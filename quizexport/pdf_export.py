"""
Printable PDF export.

Questions are described as a short list of layout blocks (wrapped text,
two-column rows, vertical space). The same blocks drive both drawing and
height estimation, so the estimate passed to ensure_space() before each
question is exactly the space the question will use and a question that
fits on one page is never split.
"""

import io
import logging
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from quizexport.answer_key import build_answer_key
from quizexport.errors import ExportRenderError
from quizexport.labels import (
    ASCII_ARROW,
    content_of,
    display_text,
    entries_of,
    format_answer,
    letter_for,
    quiz_meta_line,
    text_of,
    type_label,
)
from quizexport.models import ExportFile, ExportPayload, PrintOptions, QuestionExportDto, QuestionType
from quizexport.ordering import question_groups
from quizexport.pdf_layout import FONT, FONT_BOLD, FONT_ITALIC, PdfPageContext, PdfSettings

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

CONTENT_INDENT = 15
ANSWER_INDENT = 20
AFTER_QUESTION_TEXT = 4
AFTER_CONTENT = 5
AFTER_NOTE = 4
MATCHING_ROW_GAP = 3
OPEN_ANSWER_SPACE = 30
GROUP_HEADING_GAP = 10
BLANK_LINE = "_________________"


class Text(NamedTuple):
    text: str
    font: str = FONT
    size: str = "normal"
    indent: float = CONTENT_INDENT


class Columns(NamedTuple):
    left: str
    right: str
    font: str = FONT
    size: str = "normal"


class Space(NamedTuple):
    amount: float


def export_pdf(payload: ExportPayload, config: Optional[dict] = None) -> ExportFile:
    """Export quizzes to a paginated PDF.

    Args:
        payload: The export payload.
        config: Loaded configuration; only the ``pdf`` section is read.

    Returns:
        ExportFile named ``{prefix}.pdf``.

    Raises:
        ExportRenderError: If ReportLab fails while drawing or saving.
    """
    settings = PdfSettings.from_config(config)
    buf = io.BytesIO()
    try:
        ctx = PdfPageContext(buf, settings, version_code=payload.version_code)
        render_document(ctx, payload)
        ctx.close()
    except (ValueError, TypeError, KeyError, AttributeError, OSError) as e:
        logger.error("export_pdf: rendering failed for export %s: %s", payload.export_id, e)
        raise ExportRenderError("Failed to render PDF export") from e
    data = buf.getvalue()
    return ExportFile.from_bytes(f"{payload.filename_prefix}.pdf", PDF_MIME_TYPE, data)


def render_document(ctx: PdfPageContext, payload: ExportPayload) -> List[QuestionExportDto]:
    """Draw cover, headers, questions and answer key; return the render order."""
    options = payload.print_options
    if options.include_cover:
        _draw_cover(ctx, payload)

    for quiz in payload.quizzes:
        if len(payload.quizzes) > 1 or not options.include_cover or options.include_metadata:
            _draw_quiz_header(ctx, quiz, options)

    render_order = []
    number = 1
    for q_type, questions in question_groups(payload):
        if q_type is not None:
            draw_group_heading(ctx, q_type, questions[0], number, options)
        for question in questions:
            draw_question(ctx, question, number, options)
            render_order.append(question)
            number += 1

    _draw_answer_key(ctx, render_order, options)
    return render_order


def _draw_cover(ctx: PdfPageContext, payload: ExportPayload):
    s = ctx.settings
    ctx.start_new_page()
    ctx.y = ctx.page_height - 150
    title = payload.quizzes[0].title if len(payload.quizzes) == 1 else "Multiple Quiz Export"
    ctx.write_centered(title or "Quiz Export", FONT_BOLD, s.title_font_size * 1.5)
    ctx.skip(30)
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M")
    ctx.write_centered(f"Generated: {generated}", FONT, s.normal_font_size)
    ctx.skip(10)
    ctx.write_centered(f"Total Quizzes: {len(payload.quizzes)}", FONT, s.normal_font_size)
    ctx.write_centered(f"Total Questions: {payload.question_count}", FONT, s.normal_font_size)
    ctx.start_new_page()


def _draw_quiz_header(ctx: PdfPageContext, quiz, options: PrintOptions):
    s = ctx.settings
    ctx.ensure_space(80)
    ctx.skip(10)
    ctx.write_wrapped_text(quiz.title, FONT_BOLD, s.heading_font_size, indent=0)
    ctx.skip(4)
    if options.include_metadata:
        ctx.write_wrapped_text(quiz_meta_line(quiz), FONT, s.small_font_size, indent=0)
        if quiz.tags:
            ctx.write_wrapped_text(f"Tags: {', '.join(quiz.tags)}", FONT, s.small_font_size, indent=0)
    if quiz.description and quiz.description.strip():
        ctx.write_wrapped_text(quiz.description, FONT, s.small_font_size, indent=0)
    ctx.skip(10)


# ---------------------------------------------------------------------------
# Question blocks, one builder per type
# ---------------------------------------------------------------------------


def _lettered(entries):
    return [Text(f"{letter_for(i)}. {text_of(e)}") for i, e in enumerate(entries)]


def _blocks_choices(content):
    return _lettered(entries_of(content, "options"))


def _blocks_true_false(content):
    return [Text("A. True"), Text("B. False")]


def _blocks_fill_gap(content):
    return [Text(f"{i + 1}. {BLANK_LINE}") for i in range(len(entries_of(content, "gaps")))]


def _blocks_ordering(content):
    return _lettered(entries_of(content, "items"))


def _blocks_matching(content):
    left = entries_of(content, "left")
    right = entries_of(content, "right")
    if not left and not right:
        return []
    blocks = [Columns("Column 1", "Column 2", FONT_BOLD, "small"), Space(MATCHING_ROW_GAP)]
    for i in range(max(len(left), len(right))):
        left_text = f"{i + 1}. {text_of(left[i])}" if i < len(left) else ""
        right_text = f"{letter_for(i)}. {text_of(right[i])}" if i < len(right) else ""
        blocks.append(Columns(left_text, right_text))
        blocks.append(Space(MATCHING_ROW_GAP))
    return blocks


def _blocks_hotspot(content):
    blocks = []
    if content.get("imageUrl"):
        blocks.append(Text(f"Image: {content['imageUrl']}", FONT, "small"))
    regions = entries_of(content, "regions")
    if regions:
        blocks.append(Text(f"Regions: {len(regions)}", FONT, "small"))
    return blocks


def _blocks_compliance(content):
    return [Text(f"{i + 1}. {text_of(e)}") for i, e in enumerate(entries_of(content, "statements"))]


def _blocks_open(content):
    return [Text("Answer:", FONT, "small"), Space(OPEN_ANSWER_SPACE)]


CONTENT_BLOCKS = {
    QuestionType.MCQ_SINGLE: _blocks_choices,
    QuestionType.MCQ_MULTI: _blocks_choices,
    QuestionType.TRUE_FALSE: _blocks_true_false,
    QuestionType.FILL_GAP: _blocks_fill_gap,
    QuestionType.ORDERING: _blocks_ordering,
    QuestionType.MATCHING: _blocks_matching,
    QuestionType.HOTSPOT: _blocks_hotspot,
    QuestionType.COMPLIANCE: _blocks_compliance,
    QuestionType.OPEN: _blocks_open,
}


def question_blocks(
    question: QuestionExportDto, number: int, options: PrintOptions, settings: PdfSettings
) -> list:
    """Layout blocks for one question, from its number line to the trailing gap."""
    blocks = [Text(f"{number}. {display_text(question)}", FONT_BOLD, "normal", 0), Space(AFTER_QUESTION_TEXT)]
    blocks.extend(CONTENT_BLOCKS[question.type](content_of(question)))
    blocks.append(Space(AFTER_CONTENT))
    if options.include_hints and question.hint and question.hint.strip():
        blocks.append(Text(f"Hint: {question.hint}", FONT_ITALIC, "small"))
        blocks.append(Space(AFTER_NOTE))
    if options.include_explanations and question.explanation and question.explanation.strip():
        blocks.append(Text(f"Explanation: {question.explanation}", FONT_ITALIC, "small"))
        blocks.append(Space(AFTER_NOTE))
    blocks.append(Space(settings.question_spacing))
    return blocks


def _size(ctx: PdfPageContext, role: str) -> float:
    return getattr(ctx.settings, f"{role}_font_size")


def _matching_geometry(ctx: PdfPageContext):
    half = ctx.settings.text_width / 2
    return ctx.margin + 20, ctx.margin + half + 20, half - 40


def block_height(ctx: PdfPageContext, block) -> float:
    if isinstance(block, Space):
        return block.amount
    size = _size(ctx, block.size)
    if isinstance(block, Columns):
        _, _, width = _matching_geometry(ctx)
        rows = max(
            len(ctx.wrap(block.left, block.font, size, width)),
            len(ctx.wrap(block.right, block.font, size, width)),
        )
        return rows * ctx.line_height(size)
    lines = ctx.wrap(block.text, block.font, size, ctx.settings.text_width - block.indent)
    return len(lines) * ctx.line_height(size)


def draw_block(ctx: PdfPageContext, block):
    if isinstance(block, Space):
        ctx.skip(block_height(ctx, block))
    elif isinstance(block, Columns):
        left_x, right_x, width = _matching_geometry(ctx)
        ctx.write_two_column_wrapped_text(
            block.left, block.right, left_x, right_x, width, block.font, _size(ctx, block.size)
        )
    else:
        ctx.write_wrapped_text(block.text, block.font, _size(ctx, block.size), indent=block.indent)


def estimate_question_height(
    ctx: PdfPageContext, question: QuestionExportDto, number: int, options: PrintOptions
) -> float:
    """Vertical space the question will occupy, wrapping included."""
    return sum(block_height(ctx, block) for block in question_blocks(question, number, options, ctx.settings))


def draw_question(ctx: PdfPageContext, question: QuestionExportDto, number: int, options: PrintOptions):
    ctx.ensure_space(estimate_question_height(ctx, question, number, options))
    for block in question_blocks(question, number, options, ctx.settings):
        draw_block(ctx, block)


def group_heading_blocks(q_type) -> list:
    return [
        Space(GROUP_HEADING_GAP),
        Text(f"{type_label(q_type)} Questions", FONT_BOLD, "heading", 0),
        Space(GROUP_HEADING_GAP),
    ]


def draw_group_heading(
    ctx: PdfPageContext, q_type, first_question: QuestionExportDto, number: int, options: PrintOptions
):
    """Draw a type heading, keeping it on the same page as the group's first question."""
    blocks = group_heading_blocks(q_type)
    heading = sum(block_height(ctx, block) for block in blocks)
    ctx.ensure_space(heading + estimate_question_height(ctx, first_question, number, options))
    for block in blocks:
        draw_block(ctx, block)


# ---------------------------------------------------------------------------
# Answer key
# ---------------------------------------------------------------------------


def _answer_blocks(entry, question) -> list:
    lines = format_answer(entry, question, arrow=ASCII_ARROW)
    blocks = [Text(f"{entry.index}. {lines[0]}", FONT, "normal", 0)]
    blocks.extend(Text(line, FONT, "normal", ANSWER_INDENT) for line in lines[1:])
    blocks.append(Space(4))
    return blocks


def _draw_answer_key(ctx: PdfPageContext, render_order: List[QuestionExportDto], options: PrintOptions):
    if options.answers_on_separate_pages:
        ctx.start_new_page()
    else:
        ctx.ensure_space(100)
    ctx.skip(10)
    ctx.write_wrapped_text("Answer Key", FONT_BOLD, ctx.settings.title_font_size, indent=0)
    ctx.skip(15)

    for entry, question in zip(build_answer_key(render_order), render_order):
        blocks = _answer_blocks(entry, question)
        ctx.ensure_space(sum(block_height(ctx, b) for b in blocks))
        for block in blocks:
            draw_block(ctx, block)
