"""
Serialization of extracted questions.

JSON: an array of question objects (see models.QuestionRecord).
Zip package, one folder per question:

    question_3/question.json
    question_3/images/image_1.png
    question_4/question.json
"""

import io
import os
import json
import logging
import zipfile
from typing import Iterable, List

from models import QuestionRecord

logger = logging.getLogger(__name__)


def questions_to_json(questions: Iterable[QuestionRecord], indent: int = 2) -> str:
    return json.dumps([q.to_json_dict() for q in questions], ensure_ascii=False, indent=indent)


def folder_names(questions: List[QuestionRecord]) -> List[str]:
    """question_<number>, falling back to the 1-based position for null or repeated numbers."""
    names = []
    used = set()
    for idx, q in enumerate(questions, start=1):
        name = f"question_{q.number}" if q.number is not None else f"question_{idx}"
        if name in used:
            name = f"question_{idx}"
        suffix = 2
        base = name
        while name in used:
            name = f"{base}_{suffix}"
            suffix += 1
        used.add(name)
        names.append(name)
    return names


def questions_to_zip(questions: Iterable[QuestionRecord]) -> bytes:
    questions = list(questions)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for folder, q in zip(folder_names(questions), questions):
            body = json.dumps(q.to_json_dict(), ensure_ascii=False, indent=2)
            zf.writestr(f"{folder}/question.json", body)
            for filename, blob in q.images.items():
                zf.writestr(f"{folder}/images/{filename}", blob)
    return buf.getvalue()


def _ensure_parent(path: str):
    parent = os.path.dirname(os.path.abspath(path))
    if not os.path.exists(parent):
        os.makedirs(parent)


def write_json(questions: Iterable[QuestionRecord], path: str) -> str:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(questions_to_json(questions))
    logger.info("Wrote JSON to %s", path)
    return path


def write_zip(questions: Iterable[QuestionRecord], path: str) -> str:
    _ensure_parent(path)
    with open(path, "wb") as f:
        f.write(questions_to_zip(questions))
    logger.info("Wrote question package to %s", path)
    return path
