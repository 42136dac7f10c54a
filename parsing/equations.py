import re
import logging
from html import escape
from typing import Optional

from util import symbols
from util.equation_blob import EquationConverter, NullEquationConverter
from .preprocessor import NS

logger = logging.getLogger(__name__)

M = '{%s}' % NS['m']
M_T = M + 't'

OPERATORS = {'=': '=', '×': '×', '*': '×', '+': '+', '-': '-', '−': '-'}
OPERATOR_SPLIT = re.compile(r'([=×*+\-−])')


def _local(tag) -> str:
    if not isinstance(tag, str):
        return ''
    return tag.rsplit('}', 1)[-1]


def _math_text(node) -> str:
    if node is None:
        return ''
    return ''.join(t.text or '' for t in node.iter(M_T))


def _render_run(run) -> str:
    out = []
    for token in OPERATOR_SPLIT.split(_math_text(run)):
        token = token.strip()
        if not token:
            continue
        if token in OPERATORS:
            out.append(f"<mo>{OPERATORS[token]}</mo>")
        else:
            out.append(f"<mi>{escape(token, quote=False)}</mi>")
    return ''.join(out)


def _render_script(node, script_tag: str, mathml_tag: str) -> str:
    base = _math_text(node.find(M + 'e'))
    script = _math_text(node.find(M + script_tag))
    if not base or not script:
        return ''
    return (f"<{mathml_tag}><mi>{escape(base, quote=False)}</mi>"
            f"<mn>{escape(script, quote=False)}</mn></{mathml_tag}>")


def _render_children(node, allowed=None) -> str:
    parts = []
    for child in node:
        kind = _local(child.tag)
        if allowed is not None and kind not in allowed:
            continue
        if kind == 'sSub':
            parts.append(_render_script(child, 'sub', 'msub'))
        elif kind == 'sSup':
            parts.append(_render_script(child, 'sup', 'msup'))
        elif kind == 'f':
            parts.append(_render_fraction(child))
        elif kind == 'r':
            parts.append(_render_run(child))
    return ''.join(parts)


def _render_fraction(node) -> str:
    num = node.find(M + 'num')
    den = node.find(M + 'den')
    if num is None or den is None:
        return ''
    num_ml = _render_children(num, allowed=('sSub', 'r'))
    den_ml = _render_children(den, allowed=('sSub', 'r'))
    if not num_ml or not den_ml:
        return ''
    return f"<mfrac><mrow>{num_ml}</mrow><mrow>{den_ml}</mrow></mfrac>"


def office_math_to_mathml(math_node) -> str:
    """
    Convert one m:oMath node. Direct children are mixed content and are
    rendered in document order; unknown kinds are skipped.
    """
    try:
        body = _render_children(math_node)
    except Exception as e:
        logger.warning("Office Math conversion failed: %s", e)
        return ''
    if not body:
        return ''
    return f'<math display="block"><mrow>{body}</mrow></math>'


def symbol_to_text(char_code: Optional[str], font: Optional[str]) -> str:
    if not char_code:
        return ''
    found = symbols.lookup(font, char_code)
    if found is None:
        logger.debug("Unknown symbol %s in font %s", char_code, font)
        return f"[{char_code}]"
    return found


class EquationNormalizer:
    """Symbol codes, Office Math and legacy OLE equations behind one contract."""

    def __init__(self, converter: EquationConverter = None):
        self.converter = converter or NullEquationConverter()

    def symbol(self, char_code, font) -> str:
        return symbol_to_text(char_code, font)

    def office_math(self, math_node) -> str:
        return office_math_to_mathml(math_node)

    def ole_blob(self, blob: bytes) -> Optional[str]:
        try:
            mathml = self.converter.convert(blob)
        except Exception as e:
            logger.warning("Equation conversion failed, equation skipped: %s", e)
            return None
        if not mathml or '<math' not in mathml:
            logger.warning("Equation converter returned no MathML, equation skipped")
            return None
        return mathml
