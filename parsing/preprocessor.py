import re
import logging
from typing import Iterator, Optional, Tuple

from docx import Document
from docx.document import Document as _Document
from docx.oxml.text.paragraph import CT_P
from docx.oxml.table import CT_Tbl
from docx.table import _Cell, Table
from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)

NS = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'm': 'http://schemas.openxmlformats.org/officeDocument/2006/math',
    'a': 'http://schemas.openxmlformats.org/drawingml/2006/main',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'v': 'urn:schemas-microsoft-com:vml',
    'o': 'urn:schemas-microsoft-com:office:office',
    'mc': 'http://schemas.openxmlformats.org/markup-compatibility/2006',
}

R_EMBED = '{%s}embed' % NS['r']
R_ID = '{%s}id' % NS['r']

# Regex Patterns
# "6.The", "17. Assertion" start a question; "1.1", "2.5 m/s" do not.
Q_PATTERN = re.compile(r'^(\d+)\.\s*[A-Z]')
NUMBER_PREFIX = re.compile(r'^\s*(\d+)\.')
NEXT_Q_PATTERN = re.compile(r'\d+\.\s*[A-Z]')


def is_question_start(text: str) -> bool:
    text = text.strip()
    return bool(text) and Q_PATTERN.match(text) is not None


def open_document(source) -> Optional[_Document]:
    """Open a path, file-like object or already loaded Document. None if unreadable."""
    if isinstance(source, _Document):
        return source
    try:
        return Document(source)
    except Exception as e:
        logger.error("Cannot open document %s: %s", getattr(source, 'name', source), e)
        return None


def iter_block_items(parent) -> Iterator:
    """Iterate through docx blocks (Paragraphs and Tables)"""
    if isinstance(parent, _Document):
        parent_elm = parent.element.body
    elif isinstance(parent, _Cell):
        parent_elm = parent._tc
    else:
        raise ValueError("Parent object error")

    if parent_elm is None:
        return

    for child in parent_elm.iterchildren():
        if isinstance(child, CT_P):
            yield Paragraph(child, parent)
        elif isinstance(child, CT_Tbl):
            yield Table(child, parent)


def iter_paragraphs(doc: _Document) -> Iterator[Paragraph]:
    """Top-level body paragraphs in document order; tables and sectPr are skipped."""
    for block in iter_block_items(doc):
        if isinstance(block, Paragraph):
            yield block


def resolve_part(doc: _Document, r_id: Optional[str]) -> Optional[Tuple[str, bytes]]:
    """
    Follow a relationship id of the main document part.
    Returns (target_ref, blob) or None when the id or its target is unusable.
    """
    if not r_id:
        return None

    rel = doc.part.rels.get(r_id)
    if rel is None:
        logger.warning("Relationship %s not found, reference skipped", r_id)
        return None
    if rel.is_external:
        logger.warning("Relationship %s points outside the package (%s), skipped", r_id, rel.target_ref)
        return None

    try:
        blob = rel.target_part.blob
    except (KeyError, AttributeError) as e:
        logger.warning("Target of relationship %s is unreadable: %s", r_id, e)
        return None

    if blob is None:
        return None
    return rel.target_ref, blob
