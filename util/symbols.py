from typing import Dict, List, Optional

# ==================== Symbol font tables ====================
# Keys are w:sym/@w:char codes (upper-case), values are (unicode, description).

SYMBOL_FONT_MAP = {
    # Arithmetic
    "F02B": ("+", "Plus"),
    "F02D": ("−", "Minus"),
    "F0B4": ("×", "Multiplication operator"),
    "F0B8": ("÷", "Division operator"),
    "F0B1": ("±", "Plus-minus"),
    "F0F1": ("∓", "Minus-plus"),
    "F0D7": ("⋅", "Dot operator"),

    # Comparison and equality
    "F03D": ("=", "Equals"),
    "F0B9": ("≠", "Not equal"),
    "F03C": ("<", "Less than"),
    "F03E": (">", "Greater than"),
    "F0A3": ("≤", "Less than or equal"),
    "F0B3": ("≥", "Greater than or equal"),
    "F0BB": ("≈", "Approximately equal"),
    "F0BA": ("≡", "Identical to"),
    "F040": ("≅", "Congruent"),
    "F07E": ("∼", "Similar"),

    # Greek, lower case
    "F061": ("α", "Alpha (lowercase)"),
    "F062": ("β", "Beta (lowercase)"),
    "F067": ("γ", "Gamma (lowercase)"),
    "F064": ("δ", "Delta (lowercase)"),
    "F065": ("ε", "Epsilon (lowercase)"),
    "F07A": ("ζ", "Zeta (lowercase)"),
    "F068": ("η", "Eta (lowercase)"),
    "F071": ("θ", "Theta (lowercase)"),
    "F069": ("ι", "Iota (lowercase)"),
    "F06B": ("κ", "Kappa (lowercase)"),
    "F06C": ("λ", "Lambda (lowercase)"),
    "F06D": ("μ", "Mu (lowercase)"),
    "F06E": ("ν", "Nu (lowercase)"),
    "F078": ("ξ", "Xi (lowercase)"),
    "F06F": ("ο", "Omicron (lowercase)"),
    "F070": ("π", "Pi"),
    "F072": ("ρ", "Rho (lowercase)"),
    "F073": ("σ", "Sigma (lowercase)"),
    "F074": ("τ", "Tau (lowercase)"),
    "F075": ("υ", "Upsilon (lowercase)"),
    "F066": ("φ", "Phi (lowercase)"),
    "F063": ("χ", "Chi (lowercase)"),
    "F079": ("ψ", "Psi (lowercase)"),
    "F077": ("ω", "Omega (lowercase)"),

    # Greek, upper case
    "F041": ("Α", "Alpha (uppercase)"),
    "F042": ("Β", "Beta (uppercase)"),
    "F047": ("Γ", "Gamma (uppercase)"),
    "F044": ("Δ", "Delta (uppercase)"),
    "F045": ("Ε", "Epsilon (uppercase)"),
    "F05A": ("Ζ", "Zeta (uppercase)"),
    "F048": ("Η", "Eta (uppercase)"),
    "F051": ("Θ", "Theta (uppercase)"),
    "F049": ("Ι", "Iota (uppercase)"),
    "F04B": ("Κ", "Kappa (uppercase)"),
    "F04C": ("Λ", "Lambda (uppercase)"),
    "F04D": ("Μ", "Mu (uppercase)"),
    "F04E": ("Ν", "Nu (uppercase)"),
    "F058": ("Ξ", "Xi (uppercase)"),
    "F04F": ("Ο", "Omicron (uppercase)"),
    "F050": ("Π", "Pi (uppercase)"),
    "F052": ("Ρ", "Rho (uppercase)"),
    "F053": ("Σ", "Sigma (uppercase)"),
    "F054": ("Τ", "Tau (uppercase)"),
    "F055": ("Υ", "Upsilon (uppercase)"),
    "F046": ("Φ", "Phi (uppercase)"),
    "F043": ("Χ", "Chi (uppercase)"),
    "F059": ("Ψ", "Psi (uppercase)"),
    "F057": ("Ω", "Omega (uppercase)"),

    # Operators
    "F0A5": ("∞", "Infinity"),
    "F0B0": ("°", "Degree"),
    "F0A2": ("′", "Prime"),
    "F0B2": ("″", "Double prime"),
    "F0D1": ("∇", "Nabla (gradient)"),
    "F0B6": ("∂", "Partial derivative"),
    "F0F2": ("∫", "Integral"),
    "F0E5": ("∑", "Summation"),
    "F0D5": ("∏", "Product"),
    "F0D6": ("√", "Square root"),
    "F0D0": ("∠", "Angle"),

    # Sets
    "F0CE": ("∈", "Element of"),
    "F0CF": ("∋", "Contains"),
    "F0C9": ("∉", "Not element of"),
    "F0C7": ("∩", "Intersection"),
    "F0C8": ("∪", "Union"),
    "F0C6": ("∅", "Empty set"),
    "F0C5": ("⊂", "Subset of"),
    "F0C3": ("⊃", "Superset of"),
    "F0CA": ("⊆", "Subset of or equal"),
    "F0CB": ("⊇", "Superset of or equal"),

    # Logic
    "F0D9": ("∧", "Logical AND"),
    "F0DA": ("∨", "Logical OR"),
    "F0D8": ("¬", "Logical NOT"),
    "F0A0": ("∀", "For all"),
    "F024": ("∃", "There exists"),

    # Arrows
    "F0AC": ("←", "Left arrow"),
    "F0AE": ("→", "Right arrow"),
    "F0AD": ("↑", "Up arrow"),
    "F0AF": ("↓", "Down arrow"),
    "F0AB": ("↔", "Left-right arrow"),
    "F0DC": ("⇐", "Left double arrow"),
    "F0DE": ("⇒", "Right double arrow"),
    "F0DD": ("⇑", "Up double arrow"),
    "F0DF": ("⇓", "Down double arrow"),
    "F0DB": ("⇔", "Left-right double arrow"),

    # Fractions
    "F0BD": ("½", "One half"),
    "F0BC": ("¼", "One quarter"),
    "F0BE": ("¾", "Three quarters"),
}

WINGDINGS_FONT_MAP = {
    "F021": ("✁", "Scissors"),
    "F022": ("✂", "Scissors (solid)"),
    "F04A": ("☺", "Smiley face"),
    "F04C": ("☹", "Frowning face"),
    "F0FC": ("✓", "Check mark"),
    "F0FB": ("✗", "Ballot X"),
}

WEBDINGS_FONT_MAP = {
    "F021": ("♠", "Spade suit"),
    "F022": ("♣", "Club suit"),
}

FONT_MAPPINGS = {
    "symbol": SYMBOL_FONT_MAP,
    "wingdings": WINGDINGS_FONT_MAP,
    "webdings": WEBDINGS_FONT_MAP,
}


def _font_key(font: Optional[str]) -> Optional[str]:
    return font.strip().lower() if font is not None else None


def _normalize(font: Optional[str], code: Optional[str]):
    if font is None or code is None:
        return None, None
    return _font_key(font), code.strip().upper()


def lookup(font: Optional[str], code: Optional[str]) -> Optional[str]:
    """Unicode text for a (font, char code) pair, or None when unknown."""
    font_key, code_key = _normalize(font, code)
    font_map = FONT_MAPPINGS.get(font_key)
    if not font_map:
        return None
    entry = font_map.get(code_key)
    return entry[0] if entry else None


def symbol_info(font: Optional[str], code: Optional[str]) -> Optional[Dict[str, str]]:
    font_key, code_key = _normalize(font, code)
    font_map = FONT_MAPPINGS.get(font_key)
    if not font_map or code_key not in font_map:
        return None
    unicode_text, description = font_map[code_key]
    return {
        "char_code": code_key,
        "font": font_key,
        "unicode": unicode_text,
        "description": description,
    }


def supported_fonts() -> List[str]:
    return list(FONT_MAPPINGS.keys())


def supported_codes(font: Optional[str]) -> List[str]:
    font_map = FONT_MAPPINGS.get(_font_key(font))
    return list(font_map.keys()) if font_map else []


def font_supported(font: Optional[str]) -> bool:
    return _font_key(font) in FONT_MAPPINGS


def statistics() -> Dict:
    return {
        "total_fonts": len(FONT_MAPPINGS),
        "total_symbols": sum(len(m) for m in FONT_MAPPINGS.values()),
        "fonts": {name: len(m) for name, m in FONT_MAPPINGS.items()},
    }
