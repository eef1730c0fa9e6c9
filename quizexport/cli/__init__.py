"""
CLI command modules for the quiz exporter.

Provides shared helpers for the command modules.
"""

import json

from quizexport.models import QuizExportDto


def load_quizzes(path):
    """Read a JSON file holding one quiz object or an array of quizzes.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the JSON is invalid or a quiz fails validation.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a quiz object or an array of quizzes")
    return [QuizExportDto.model_validate(item) for item in data]
