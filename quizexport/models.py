"""Pydantic models for the export payload and its output."""

import io
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

VERSION_CODE_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
VERSION_CODE_LENGTH = 6
DEFAULT_FILENAME_PREFIX = "quizzes_export"

_MASK_64 = (1 << 64) - 1


class QuestionType(str, Enum):
    """Closed set of question types the exporters understand."""

    MCQ_SINGLE = "MCQ_SINGLE"
    MCQ_MULTI = "MCQ_MULTI"
    TRUE_FALSE = "TRUE_FALSE"
    FILL_GAP = "FILL_GAP"
    ORDERING = "ORDERING"
    MATCHING = "MATCHING"
    HOTSPOT = "HOTSPOT"
    COMPLIANCE = "COMPLIANCE"
    OPEN = "OPEN"


class Difficulty(str, Enum):
    """Quiz and question difficulty levels."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class ExportFormat(str, Enum):
    """Output formats the renderer registry can be asked for."""

    HTML_PRINT = "HTML_PRINT"
    PDF_PRINT = "PDF_PRINT"
    XLSX_EDITABLE = "XLSX_EDITABLE"
    JSON_EDITABLE = "JSON_EDITABLE"
    DOCX_PRINT = "DOCX_PRINT"


class PrintOptions(BaseModel):
    """Flags controlling what the print-oriented renderers emit."""

    model_config = ConfigDict(frozen=True)

    include_cover: bool = False
    include_metadata: bool = False
    include_hints: bool = False
    include_explanations: bool = False
    group_questions_by_type: bool = False
    answers_on_separate_pages: bool = True

    @classmethod
    def defaults(cls) -> "PrintOptions":
        return cls(
            include_cover=True,
            include_metadata=True,
            answers_on_separate_pages=True,
        )

    @classmethod
    def compact(cls) -> "PrintOptions":
        return cls(answers_on_separate_pages=True)

    @classmethod
    def teacher_edition(cls) -> "PrintOptions":
        return cls(
            include_cover=True,
            include_metadata=True,
            include_hints=True,
            include_explanations=True,
            answers_on_separate_pages=True,
        )

    @classmethod
    def preset(cls, name: str) -> "PrintOptions":
        """Look up a preset by name (defaults, compact, teacher_edition)."""
        presets = {
            "defaults": cls.defaults,
            "compact": cls.compact,
            "teacher_edition": cls.teacher_edition,
        }
        try:
            return presets[name]()
        except KeyError:
            raise ValueError(f"Unknown print options preset: {name}") from None


class QuestionExportDto(BaseModel):
    """Read-only projection of a question as it will be exported."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: QuestionType
    difficulty: Optional[Difficulty] = None
    question_text: str = Field("", alias="questionText")
    content: Any = None
    hint: Optional[str] = None
    explanation: Optional[str] = None
    attachment_url: Optional[str] = Field(None, alias="attachmentUrl")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v


class QuizExportDto(BaseModel):
    """Read-only projection of a quiz and its ordered questions."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = ""
    description: Optional[str] = None
    visibility: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    estimated_time: Optional[int] = Field(None, alias="estimatedTime", ge=0)
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    creator_id: Optional[str] = Field(None, alias="creatorId")
    questions: List[QuestionExportDto] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @field_validator("id", "creator_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return str(v) if v is not None else v

    @field_validator("tags", "questions", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v


def derive_version_code(export_id: uuid.UUID) -> str:
    """Derive a short, human-readable code from an export id.

    The code is the low-order base-36 digits of the id, upper-case and
    zero-padded to six characters.
    """
    value = export_id.int
    digits = []
    for _ in range(VERSION_CODE_LENGTH):
        value, rem = divmod(value, len(VERSION_CODE_ALPHABET))
        digits.append(VERSION_CODE_ALPHABET[rem])
    return "".join(reversed(digits))


def derive_shuffle_seed(export_id: uuid.UUID) -> int:
    """XOR-fold the high and low 64 bits of the export id."""
    value = export_id.int
    return ((value >> 64) & _MASK_64) ^ (value & _MASK_64)


class ExportPayload(BaseModel):
    """Everything a renderer needs to produce one export file.

    Missing options, prefix, version code and seed are filled in
    deterministically from the export id. The shuffle seed is carried
    for callers that reorder content before rendering; renderers do not
    read it.
    """

    model_config = ConfigDict(frozen=True)

    quizzes: List[QuizExportDto] = Field(default_factory=list)
    print_options: PrintOptions = Field(default_factory=PrintOptions.compact)
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    export_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    version_code: Optional[str] = None
    shuffle_seed: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data):
        if not isinstance(data, dict):
            return data
        data = {k: v for k, v in data.items() if v is not None}
        if not data.get("filename_prefix"):
            data["filename_prefix"] = DEFAULT_FILENAME_PREFIX
        export_id = data.get("export_id") or uuid.uuid4()
        if not isinstance(export_id, uuid.UUID):
            export_id = uuid.UUID(str(export_id))
        data["export_id"] = export_id
        if not data.get("version_code"):
            data["version_code"] = derive_version_code(export_id)
        data.setdefault("shuffle_seed", derive_shuffle_seed(export_id))
        return data

    @classmethod
    def of(cls, quizzes, print_options: Optional[PrintOptions] = None, **kwargs) -> "ExportPayload":
        return cls(quizzes=list(quizzes or []), print_options=print_options, **kwargs)

    @property
    def question_count(self) -> int:
        return sum(len(q.questions) for q in self.quizzes)


class ExportFile(BaseModel):
    """A rendered export: filename, mime type and a re-openable byte source."""

    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str
    opener: Callable[[], io.BufferedIOBase]
    length: int = Field(..., ge=0)

    @field_validator("filename", "mime_type")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v

    @classmethod
    def from_bytes(cls, filename: str, mime_type: str, data: bytes) -> "ExportFile":
        return cls(
            filename=filename,
            mime_type=mime_type,
            opener=lambda: io.BytesIO(data),
            length=len(data),
        )

    def open(self):
        """Return a fresh binary stream positioned at the start."""
        return self.opener()

    def read_bytes(self) -> bytes:
        with self.open() as stream:
            return stream.read()


def to_export_dict(quiz: QuizExportDto) -> Dict[str, Any]:
    """Serialize a quiz with its wire-level (camelCase) field names."""
    return quiz.model_dump(mode="json", by_alias=True)
