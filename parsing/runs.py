import re
from html import escape
from typing import List, NamedTuple

from docx.text.paragraph import Paragraph
from docx.text.run import Run

from .preprocessor import NS

W = '{%s}' % NS['w']
W_R = W + 'r'
W_T = W + 't'
W_SYM = W + 'sym'
W_TAB = W + 'tab'
W_BR = W + 'br'
W_CHAR = W + 'char'
W_FONT = W + 'font'
W_TXBX = W + 'txbxContent'

NORMAL = 'normal'
SUPERSCRIPT = 'superscript'
SUBSCRIPT = 'subscript'

TRAILING_DIGITS = re.compile(r'\d+$')
TRAILING_LETTERS = re.compile(r'[A-Za-z]+$')


class RunFragment(NamedTuple):
    kind: str
    text: str


def run_alignment(run: Run) -> str:
    if run.font.superscript:
        return SUPERSCRIPT
    if run.font.subscript:
        return SUBSCRIPT
    return NORMAL


def iter_runs(paragraph: Paragraph):
    """All w:r of the paragraph (hyperlinks, field results...), text boxes excluded."""
    for r in paragraph._p.iter(W_R):
        if any(a.tag == W_TXBX for a in r.iterancestors()):
            continue
        yield Run(r, paragraph)


def run_tokens(run: Run, normalizer) -> List[str]:
    tokens = []
    for child in run._r.iterchildren():
        if child.tag == W_T:
            if child.text:
                tokens.append(child.text)
        elif child.tag == W_SYM:
            sym = normalizer.symbol(child.get(W_CHAR), child.get(W_FONT))
            if sym:
                tokens.append(sym)
        elif child.tag in (W_TAB, W_BR):
            tokens.append(' ')
    return tokens


def classify_runs(paragraph: Paragraph, normalizer) -> List[RunFragment]:
    fragments = []
    for run in iter_runs(paragraph):
        kind = run_alignment(run)
        for token in run_tokens(run, normalizer):
            fragments.append(RunFragment(kind, token))
    return fragments


def _script_markup(kind: str, base: str, script: str) -> str:
    script = escape(script, quote=False)
    if kind == SUPERSCRIPT:
        return f"<math><msup><mn>{base}</mn><mn>{script}</mn></msup></math>"
    # Subscript values are tagged <mn> even when alphabetic (v_x -> <mn>x</mn>)
    return f"<math><msub><mi>{base}</mi><mn>{script}</mn></msub></math>"


def merge_scripts(fragments: List[RunFragment]) -> str:
    """
    Fold (base, script) fragment pairs into MathML.
    A superscript takes the trailing digits of the normal fragment before it,
    a subscript takes its trailing letters. Without such a base the script
    text is kept literally. Literal text is HTML-escaped, so the only markup
    in the result is the MathML produced here.
    """
    pieces = []
    prev = None
    for frag in fragments:
        merged = False
        if frag.kind != NORMAL and prev is not None and prev.kind == NORMAL:
            pattern = TRAILING_DIGITS if frag.kind == SUPERSCRIPT else TRAILING_LETTERS
            match = pattern.search(prev.text)
            if match:
                # pieces[-1] is prev.text, emitted one step earlier
                pieces[-1] = escape(prev.text[:match.start()], quote=False)
                pieces.append(_script_markup(frag.kind, match.group(), frag.text))
                merged = True
        if not merged:
            pieces.append(escape(frag.text, quote=False))
        prev = frag
    return ''.join(pieces)


def paragraph_text(paragraph: Paragraph, normalizer) -> str:
    return merge_scripts(classify_runs(paragraph, normalizer)).strip()
