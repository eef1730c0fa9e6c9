"""Tests for payload models and derived defaults (quizexport/models.py)."""

import re
import uuid

import pytest
from pydantic import ValidationError

from quizexport.models import (
    DEFAULT_FILENAME_PREFIX,
    ExportFile,
    ExportPayload,
    PrintOptions,
    QuestionExportDto,
    QuestionType,
    QuizExportDto,
    derive_shuffle_seed,
    derive_version_code,
)


class TestPrintOptions:
    def test_defaults_preset(self):
        opts = PrintOptions.defaults()
        assert opts.include_cover and opts.include_metadata and opts.answers_on_separate_pages
        assert not opts.include_hints
        assert not opts.include_explanations
        assert not opts.group_questions_by_type

    def test_compact_preset(self):
        opts = PrintOptions.compact()
        assert opts.answers_on_separate_pages
        assert not opts.include_cover
        assert not opts.include_metadata

    def test_teacher_edition_preset(self):
        opts = PrintOptions.teacher_edition()
        assert opts.include_hints and opts.include_explanations and opts.include_cover
        assert not opts.group_questions_by_type

    def test_preset_by_name(self):
        assert PrintOptions.preset("compact") == PrintOptions.compact()

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown"):
            PrintOptions.preset("fancy")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            PrintOptions.compact().include_cover = True


class TestDerivedValues:
    def test_version_code_shape(self):
        for _ in range(20):
            assert re.fullmatch(r"[0-9A-Z]{6}", derive_version_code(uuid.uuid4()))

    def test_version_code_deterministic(self):
        export_id = uuid.UUID(int=12345)
        assert derive_version_code(export_id) == derive_version_code(export_id)
        assert derive_version_code(uuid.UUID(int=35)) == "00000Z"

    def test_shuffle_seed_xor_fold(self):
        export_id = uuid.UUID(int=(0xF0 << 64) | 0x0F)
        assert derive_shuffle_seed(export_id) == 0xFF


class TestExportPayload:
    def test_defaults_filled(self):
        payload = ExportPayload(quizzes=[])
        assert payload.print_options == PrintOptions.compact()
        assert payload.filename_prefix == DEFAULT_FILENAME_PREFIX
        assert payload.version_code == derive_version_code(payload.export_id)
        assert payload.shuffle_seed == derive_shuffle_seed(payload.export_id)

    def test_of_with_none_options(self, make_quiz):
        payload = ExportPayload.of([make_quiz()], None)
        assert payload.print_options == PrintOptions.compact()
        assert len(payload.quizzes) == 1

    def test_explicit_values_kept(self):
        export_id = uuid.uuid4()
        payload = ExportPayload(
            quizzes=[], filename_prefix="x", export_id=export_id, version_code="ABC123", shuffle_seed=7
        )
        assert payload.export_id == export_id
        assert payload.version_code == "ABC123"
        assert payload.shuffle_seed == 7

    def test_blank_prefix_defaults(self):
        assert ExportPayload(quizzes=[], filename_prefix="").filename_prefix == DEFAULT_FILENAME_PREFIX

    def test_question_count(self, make_quiz, make_question):
        quizzes = [make_quiz(questions=[make_question(), make_question()]), make_quiz()]
        assert ExportPayload(quizzes=quizzes).question_count == 2


class TestDtos:
    def test_camel_case_aliases(self):
        quiz = QuizExportDto.model_validate(
            {
                "id": 5,
                "title": "Q",
                "estimatedTime": 12,
                "tags": None,
                "questions": [
                    {"id": 1, "type": "OPEN", "questionText": "Why?", "content": {}},
                ],
            }
        )
        assert quiz.id == "5"
        assert quiz.estimated_time == 12
        assert quiz.tags == []
        assert quiz.questions[0].type == QuestionType.OPEN
        assert quiz.questions[0].question_text == "Why?"

    def test_unknown_question_type_rejected(self):
        with pytest.raises(ValidationError):
            QuestionExportDto(id="1", type="ESSAY")


class TestExportFile:
    def test_from_bytes_reopenable(self):
        export_file = ExportFile.from_bytes("a.txt", "text/plain", b"hello")
        assert export_file.length == 5
        assert export_file.read_bytes() == b"hello"
        assert export_file.read_bytes() == b"hello"

    def test_blank_filename_rejected(self):
        with pytest.raises(ValidationError):
            ExportFile.from_bytes(" ", "text/plain", b"")

    def test_blank_mime_rejected(self):
        with pytest.raises(ValidationError):
            ExportFile.from_bytes("a.txt", "", b"")
