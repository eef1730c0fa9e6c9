"""
Shared pytest fixtures for the quiz export tests.

Fixture summary
---------------
Builders:
    make_question        -- factory for QuestionExportDto with sensible defaults
    make_quiz            -- factory for QuizExportDto
    make_payload         -- factory for ExportPayload with a fixed version code

Content samples:
    mcq_single_content   -- 4 options, second correct
    matching_content     -- 3 left items matched to 3 right items
    all_type_questions   -- one question of every QuestionType

Config:
    test_config          -- default config dict from load_config()
"""

import uuid
from datetime import datetime

import pytest

from quizexport.config import DEFAULT_CONFIG, load_config
from quizexport.models import (
    Difficulty,
    ExportPayload,
    PrintOptions,
    QuestionExportDto,
    QuestionType,
    QuizExportDto,
)

FIXED_EXPORT_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


# ---------------------------------------------------------------------------
# Content samples
# ---------------------------------------------------------------------------


def mcq_content(correct_index=1, count=4):
    return {
        "options": [
            {"id": f"opt{i}", "text": f"Option {i + 1}", "correct": i == correct_index}
            for i in range(count)
        ]
    }


def matching_content():
    return {
        "left": [
            {"id": "l1", "text": "Dog", "matchId": "r2"},
            {"id": "l2", "text": "Cat", "matchId": "r3"},
            {"id": "l3", "text": "Cow", "matchId": "r1"},
        ],
        "right": [
            {"id": "r1", "text": "Moo"},
            {"id": "r2", "text": "Woof"},
            {"id": "r3", "text": "Meow"},
        ],
    }


SAMPLE_CONTENT = {
    QuestionType.MCQ_SINGLE: mcq_content(),
    QuestionType.MCQ_MULTI: {
        "options": [
            {"id": "a", "text": "2", "correct": True},
            {"id": "b", "text": "4", "correct": False},
            {"id": "c", "text": "3", "correct": True},
        ]
    },
    QuestionType.TRUE_FALSE: {"answer": True},
    QuestionType.FILL_GAP: {
        "text": "The capital of France is {1} and its tower is the {2}.",
        "gaps": [{"id": 1, "answer": "Paris"}, {"id": 2, "answer": "Eiffel Tower"}],
    },
    QuestionType.ORDERING: {
        "items": [
            {"id": "i1", "text": "Boil water"},
            {"id": "i2", "text": "Add tea"},
            {"id": "i3", "text": "Pour"},
        ],
        "correctOrder": ["i1", "i3", "i2"],
    },
    QuestionType.MATCHING: matching_content(),
    QuestionType.HOTSPOT: {
        "imageUrl": "https://example.com/map.png",
        "regions": [
            {"id": 10, "x": 0, "y": 0, "width": 5, "height": 5, "correct": False},
            {"id": 20, "x": 5, "y": 5, "width": 5, "height": 5, "correct": True},
        ],
    },
    QuestionType.COMPLIANCE: {
        "statements": [
            {"id": "s1", "text": "Wear a helmet", "compliant": True},
            {"id": "s2", "text": "Skip the briefing", "compliant": False},
            {"id": "s3", "text": "Report incidents", "compliant": True},
        ]
    },
    QuestionType.OPEN: {"answer": "Photosynthesis converts light to energy."},
}


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_question(**kwargs):
    """Create a QuestionExportDto; content defaults to the type's sample."""
    q_type = QuestionType(kwargs.pop("type", QuestionType.MCQ_SINGLE))
    defaults = {
        "id": str(uuid.uuid4()),
        "type": q_type,
        "difficulty": Difficulty.MEDIUM,
        "question_text": f"Sample {q_type.value} question?",
        "content": SAMPLE_CONTENT[q_type],
    }
    defaults.update(kwargs)
    return QuestionExportDto(**defaults)


def build_quiz(**kwargs):
    defaults = {
        "id": str(uuid.uuid4()),
        "title": "Test Quiz",
        "description": "A quiz for tests.",
        "difficulty": Difficulty.EASY,
        "estimated_time": 10,
        "tags": ["science", "biology"],
        "category": "General",
        "questions": [],
        "created_at": datetime(2026, 1, 15, 10, 30),
    }
    defaults.update(kwargs)
    return QuizExportDto(**defaults)


def build_payload(quizzes, options=None, **kwargs):
    defaults = {
        "quizzes": quizzes,
        "print_options": options or PrintOptions.compact(),
        "filename_prefix": "test_export",
        "export_id": FIXED_EXPORT_ID,
        "version_code": "TEST01",
    }
    defaults.update(kwargs)
    return ExportPayload(**defaults)


@pytest.fixture
def make_question():
    return build_question


@pytest.fixture
def make_quiz():
    return build_quiz


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def mcq_single_content():
    return mcq_content()


@pytest.fixture
def all_type_questions():
    """One question of every type, in enum order."""
    return [build_question(type=t, id=f"q-{t.value.lower()}") for t in QuestionType]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.fixture
def test_config(tmp_path):
    """Default configuration (no config file on disk)."""
    config = load_config(str(tmp_path / "missing.yaml"))
    assert config == DEFAULT_CONFIG
    return config
