import io
import base64

import pytest
from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.packuri import PackURI
from docx.opc.part import Part
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import qn

from parsing.preprocessor import NS, R_EMBED

# 1x1 transparent PNG
PNG_1PX = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class DocBuilder:
    """Builds small .docx fixtures in memory."""

    def __init__(self):
        self.doc = Document()
        self._ole_count = 0

    def para(self, text=""):
        return self.doc.add_paragraph(text)

    def scripted(self, *parts):
        """parts: (text, kind) with kind in normal/superscript/subscript."""
        p = self.doc.add_paragraph()
        for text, kind in parts:
            run = p.add_run(text)
            if kind == "superscript":
                run.font.superscript = True
            elif kind == "subscript":
                run.font.subscript = True
        return p

    def symbol(self, paragraph, char, font):
        run = paragraph.add_run()
        sym = OxmlElement("w:sym")
        sym.set(qn("w:font"), font)
        sym.set(qn("w:char"), char)
        run._r.append(sym)
        return run

    def picture(self, paragraph=None, blob=PNG_1PX):
        paragraph = paragraph if paragraph is not None else self.doc.add_paragraph()
        paragraph.add_run().add_picture(io.BytesIO(blob))
        return paragraph

    def break_picture_reference(self, paragraph, r_id="rId999"):
        for blip in paragraph._p.findall(".//a:blip", NS):
            blip.set(R_EMBED, r_id)

    def omath(self, paragraph, inner_xml):
        elm = parse_xml('<m:oMath xmlns:m="%s">%s</m:oMath>' % (NS["m"], inner_xml))
        paragraph._p.append(elm)
        return elm

    def ole_equation(self, paragraph, blob=b"equation", r_id=None):
        if r_id is None:
            self._ole_count += 1
            part = Part(
                PackURI("/word/embeddings/oleObject%d.bin" % self._ole_count),
                "application/vnd.openxmlformats-officedocument.oleObject",
                blob,
                self.doc.part.package,
            )
            r_id = self.doc.part.relate_to(part, RT.OLE_OBJECT)
        run_xml = (
            '<w:r xmlns:w="%s" xmlns:o="%s" xmlns:r="%s">'
            '<w:object><o:OLEObject Type="Embed" ProgID="Equation.DSMT4" r:id="%s"/></w:object>'
            '</w:r>' % (NS["w"], NS["o"], NS["r"], r_id)
        )
        paragraph._p.append(parse_xml(run_xml))
        return r_id

    def to_stream(self):
        buf = io.BytesIO()
        self.doc.save(buf)
        buf.seek(0)
        return buf


class FakeConverter:
    """Maps known blobs to MathML; anything else fails like a broken equation."""

    def __init__(self, table=None):
        self.table = table or {}
        self.calls = []

    def convert(self, blob):
        self.calls.append(blob)
        if blob not in self.table:
            raise RuntimeError("unsupported equation")
        return self.table[blob]


@pytest.fixture
def builder():
    return DocBuilder()


@pytest.fixture
def fake_converter():
    return FakeConverter({
        b"eq-energy": "<math><mi>E</mi><mo>=</mo><mi>m</mi><msup><mi>c</mi><mn>2</mn></msup></math>",
    })


@pytest.fixture
def png():
    return PNG_1PX
