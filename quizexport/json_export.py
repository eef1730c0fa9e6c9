"""
Editable JSON export: a pretty-printed array of quizzes with their questions.
"""

import json
from typing import Optional

from quizexport.models import ExportFile, ExportPayload, to_export_dict

JSON_MIME_TYPE = "application/json"


def export_json(payload: ExportPayload, config: Optional[dict] = None) -> ExportFile:
    """Export quizzes as JSON.

    Print options, filename prefix and version code are not part of the
    document; only the quizzes are.
    """
    quizzes = [to_export_dict(quiz) for quiz in payload.quizzes]
    data = json.dumps(quizzes, indent=2, ensure_ascii=False).encode("utf-8")
    return ExportFile.from_bytes(f"{payload.filename_prefix}.json", JSON_MIME_TYPE, data)
