import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models import QuestionRecord
from parsing import preprocessor
from parsing import core
from parsing.equations import EquationNormalizer
from parsing.postprocessor import PostProcessor
from parsing.runs import paragraph_text
from util.equation_blob import EquationConverter

logger = logging.getLogger(__name__)


@dataclass
class ExtractionContext:
    """Scanner state for one extraction call. Never shared between documents."""

    buffer: List[str] = field(default_factory=list)
    inside_question: bool = False
    image_counter: int = 0
    # question number -> {filename: bytes}, moved into the record at flush
    images: Dict[int, Dict[str, bytes]] = field(default_factory=dict)
    questions: List[QuestionRecord] = field(default_factory=list)
    raw_blocks: List[str] = field(default_factory=list)


class QuestionExtractor:
    def __init__(self, converter: Optional[EquationConverter] = None):
        self.normalizer = EquationNormalizer(converter)
        self.post_processor = PostProcessor(self.normalizer)

    def _flush(self, ctx: ExtractionContext):
        if not ctx.buffer:
            return
        joined = " ".join(ctx.buffer).strip()
        if joined:
            ctx.raw_blocks.append(joined)

        q_num = self.post_processor.current_question_number(ctx)
        images = ctx.images.pop(q_num, {}) if q_num is not None else {}
        q = core.process_buffer_as_question(ctx.buffer, images)
        ctx.questions.append(q)
        logger.debug("Flushed question %s (%d options, %d images)", q.number, len(q.options), len(q.images))

    def _scan(self, doc) -> ExtractionContext:
        ctx = ExtractionContext()

        for paragraph in preprocessor.iter_paragraphs(doc):
            try:
                text = paragraph_text(paragraph, self.normalizer)
            except Exception as e:
                logger.warning("Unreadable paragraph skipped: %s", e)
                continue

            # 1. Question boundary
            if preprocessor.is_question_start(text):
                if ctx.inside_question:
                    self._flush(ctx)
                ctx.buffer = [text]
                ctx.inside_question = True
            elif ctx.inside_question and text:
                ctx.buffer.append(text)

            # 2. Embedded content of an open question
            if ctx.inside_question:
                ctx.buffer.extend(self.post_processor.embedded_chunks(doc, paragraph, ctx))

        if ctx.inside_question:
            self._flush(ctx)

        for q_num, orphaned in ctx.images.items():
            logger.warning("%d image(s) for question %s had no owning record", len(orphaned), q_num)
        return ctx

    def extract(self, source) -> List[QuestionRecord]:
        """
        Main Entry: parse a .docx (path, file object or loaded Document)
        and return its questions in source order. Unreadable input gives [].
        """
        doc = preprocessor.open_document(source)
        if doc is None:
            return []
        ctx = self._scan(doc)
        logger.info("Extracted %d questions", len(ctx.questions))
        return ctx.questions

    def extract_text(self, source) -> str:
        """Raw question blobs, one per question, separated by blank lines."""
        doc = preprocessor.open_document(source)
        if doc is None:
            return ""
        return "\n\n".join(self._scan(doc).raw_blocks)


def extract_questions(source, converter: Optional[EquationConverter] = None) -> List[QuestionRecord]:
    return QuestionExtractor(converter).extract(source)
