import os
import logging
from typing import List, Optional

from docx.text.paragraph import Paragraph

from .preprocessor import NS, R_EMBED, R_ID, NUMBER_PREFIX, resolve_part

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXT = 'png'
BARE_IMAGE_MARKER = '<img>'

W_OBJECT = '{%s}object' % NS['w']
MC_FALLBACK = '{%s}Fallback' % NS['mc']


def image_marker(filename: str) -> str:
    return f'<img src="{filename}"/>'


def _skip_reference(elem) -> bool:
    # OLE previews live in w:object, duplicate pictures in mc:Fallback
    return any(a.tag in (W_OBJECT, MC_FALLBACK) for a in elem.iterancestors())


class PostProcessor:
    """
    Pulls embedded content out of a paragraph while a question is open:
    pictures (bound to the open question), legacy OLE equations and Office Math.
    All per-document state lives on the ExtractionContext passed in.
    """

    def __init__(self, normalizer):
        self.normalizer = normalizer

    def current_question_number(self, ctx) -> Optional[int]:
        if not ctx.buffer:
            return None
        match = NUMBER_PREFIX.match(ctx.buffer[0])
        return int(match.group(1)) if match else None

    def _bind_image(self, doc, r_id, ctx) -> Optional[str]:
        resolved = resolve_part(doc, r_id)
        if resolved is None:
            return None
        target, blob = resolved

        ctx.image_counter += 1
        ext = os.path.splitext(target)[1].lstrip('.').lower() or DEFAULT_IMAGE_EXT
        filename = f"image_{ctx.image_counter}.{ext}"

        q_num = self.current_question_number(ctx)
        if q_num is None:
            logger.warning("Image %s found outside a numbered question, kept as placeholder", target)
            return BARE_IMAGE_MARKER

        ctx.images.setdefault(q_num, {})[filename] = blob
        return image_marker(filename)

    def image_references(self, paragraph: Paragraph) -> List[str]:
        refs = []
        p = paragraph._p
        for blip in p.findall('.//a:blip', NS):
            if not _skip_reference(blip):
                refs.append(blip.get(R_EMBED))
        for idata in p.findall('.//w:pict//v:imagedata', NS):
            if not _skip_reference(idata):
                refs.append(idata.get(R_ID))
        return [r for r in refs if r]

    def get_paragraph_images(self, doc, paragraph: Paragraph, ctx) -> List[str]:
        markers = []
        for r_id in self.image_references(paragraph):
            try:
                marker = self._bind_image(doc, r_id, ctx)
            except Exception as e:
                logger.warning("Error binding image %s: %s", r_id, e)
                continue
            if marker:
                markers.append(marker)
        return markers

    def get_ole_equations(self, doc, paragraph: Paragraph) -> List[str]:
        out = []
        for ole in paragraph._p.findall('.//o:OLEObject', NS):
            resolved = resolve_part(doc, ole.get(R_ID))
            if resolved is None:
                continue
            mathml = self.normalizer.ole_blob(resolved[1])
            if mathml:
                out.append(mathml)
        return out

    def get_office_math(self, paragraph: Paragraph) -> List[str]:
        out = []
        for math in paragraph._p.findall('.//m:oMath', NS):
            mathml = self.normalizer.office_math(math)
            if mathml:
                out.append(mathml)
        return out

    def embedded_chunks(self, doc, paragraph: Paragraph, ctx) -> List[str]:
        """Images, then OLE equations, then Office Math."""
        return (self.get_paragraph_images(doc, paragraph, ctx)
                + self.get_ole_equations(doc, paragraph)
                + self.get_office_math(paragraph))
