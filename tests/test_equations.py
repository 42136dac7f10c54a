import os
import sys

import pytest
from docx.oxml import parse_xml

from parsing.equations import EquationNormalizer, office_math_to_mathml, symbol_to_text
from parsing.preprocessor import NS
from util import equation_blob
from util.equation_blob import (
    CommandEquationConverter,
    EquationConversionError,
    NullEquationConverter,
    extract_math_element,
)


def omath(inner):
    return parse_xml('<m:oMath xmlns:m="%s">%s</m:oMath>' % (NS["m"], inner))


def r(text):
    return "<m:r><m:t>%s</m:t></m:r>" % text


def sub(base, script):
    return "<m:sSub><m:e>%s</m:e><m:sub>%s</m:sub></m:sSub>" % (r(base), r(script))


def sup(base, script):
    return "<m:sSup><m:e>%s</m:e><m:sup>%s</m:sup></m:sSup>" % (r(base), r(script))


def wrap(body):
    return '<math display="block"><mrow>%s</mrow></math>' % body


class TestSymbolPath:
    def test_known_symbol(self):
        assert symbol_to_text("F070", "Symbol") == "π"

    def test_unknown_symbol_is_visible(self):
        assert symbol_to_text("F999", "Symbol") == "[F999]"
        assert symbol_to_text("F0B4", "Arial") == "[F0B4]"

    def test_missing_code(self):
        assert symbol_to_text(None, "Symbol") == ""


class TestOfficeMath:
    def test_subscript_and_operators_in_order(self):
        node = omath(sub("v", "0") + r("=") + r("5"))
        assert office_math_to_mathml(node) == wrap(
            "<msub><mi>v</mi><mn>0</mn></msub><mo>=</mo><mi>5</mi>"
        )

    def test_superscript(self):
        node = omath(r("x") + sup("y", "2"))
        assert office_math_to_mathml(node) == wrap("<mi>x</mi><msup><mi>y</mi><mn>2</mn></msup>")

    def test_fraction_uses_runs_and_subscripts_only(self):
        frac = ("<m:f><m:num>%s%s</m:num><m:den>%s</m:den></m:f>"
                % (sub("v", "1"), sup("t", "2"), r("2")))
        node = omath(frac)
        assert office_math_to_mathml(node) == wrap(
            "<mfrac><mrow><msub><mi>v</mi><mn>1</mn></msub></mrow><mrow><mi>2</mi></mrow></mfrac>"
        )

    def test_operators_inside_a_run(self):
        node = omath(r("a+b*c-d"))
        assert office_math_to_mathml(node) == wrap(
            "<mi>a</mi><mo>+</mo><mi>b</mi><mo>×</mo><mi>c</mi><mo>-</mo><mi>d</mi>"
        )

    def test_text_is_escaped(self):
        node = omath(r("x&lt;y"))
        assert office_math_to_mathml(node) == wrap("<mi>x&lt;y</mi>")

    def test_unknown_children_are_skipped(self):
        node = omath("<m:rad><m:e>%s</m:e></m:rad>" % r("2") + r("k"))
        assert office_math_to_mathml(node) == wrap("<mi>k</mi>")

    def test_empty_result_is_empty_string(self):
        assert office_math_to_mathml(omath("")) == ""
        assert office_math_to_mathml(omath("<m:rad><m:e/></m:rad>")) == ""


class TestOleBlobPath:
    def test_converter_output_passes_through(self, fake_converter):
        normalizer = EquationNormalizer(fake_converter)
        assert normalizer.ole_blob(b"eq-energy").startswith("<math>")

    def test_converter_failure_is_contained(self, fake_converter):
        normalizer = EquationNormalizer(fake_converter)
        assert normalizer.ole_blob(b"broken") is None

    def test_output_without_math_is_dropped(self):
        class Garbage:
            def convert(self, blob):
                return "not mathml"

        assert EquationNormalizer(Garbage()).ole_blob(b"x") is None

    def test_default_converter_drops_equations(self):
        normalizer = EquationNormalizer()
        assert isinstance(normalizer.converter, NullEquationConverter)
        assert normalizer.ole_blob(b"x") is None


class TestCommandConverter:
    @pytest.fixture
    def temp_paths(self, monkeypatch):
        seen = []
        real_mkstemp = equation_blob.tempfile.mkstemp

        def spy(*args, **kwargs):
            fd, path = real_mkstemp(*args, **kwargs)
            seen.append(path)
            return fd, path

        monkeypatch.setattr(equation_blob.tempfile, "mkstemp", spy)
        return seen

    def test_reads_blob_from_temp_file(self, temp_paths):
        script = "import sys; sys.stdout.write('junk ' + open(sys.argv[1]).read() + ' junk')"
        converter = CommandEquationConverter([sys.executable, "-c", script])
        result = converter.convert(b"<math>\n  <mi>x</mi>\n</math>")
        assert result == "<math> <mi>x</mi> </math>"
        assert temp_paths and not os.path.exists(temp_paths[0])

    def test_failure_cleans_up(self, temp_paths):
        converter = CommandEquationConverter([sys.executable, "-c", "import sys; sys.exit(3)"])
        with pytest.raises(EquationConversionError):
            converter.convert(b"blob")
        assert temp_paths and not os.path.exists(temp_paths[0])

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            CommandEquationConverter([])

    def test_converter_from_settings(self):
        assert isinstance(equation_blob.converter_from_settings([]), NullEquationConverter)
        conv = equation_blob.converter_from_settings(["mt2mml"], timeout=5)
        assert isinstance(conv, CommandEquationConverter)
        assert conv.timeout == 5


def test_extract_math_element():
    assert extract_math_element('<?xml?>\n<math xmlns="x">\n<mi>a</mi></math>\n') == '<math xmlns="x"> <mi>a</mi></math>'
    assert extract_math_element("nothing") is None
    assert extract_math_element(None) is None
