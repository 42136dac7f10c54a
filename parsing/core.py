import re
from typing import Dict, List, Optional, Tuple

from models import QuestionRecord
from .preprocessor import NUMBER_PREFIX, NEXT_Q_PATTERN

# Field markers, matched left to right, first occurrence wins
HINT_MARKER = "Hint:"
KEY_MARKER = "Key:"
OPTION_LETTERS = "abcd"
OPTION_PATTERN = re.compile(r'(?<![A-Za-z])([%s])\)' % OPTION_LETTERS)

# MathML fragments and image markers are opaque to marker search
PROTECTED = re.compile(r'<math\b.*?</math>|<img\b[^>]*>', re.DOTALL)


def mask_markup(text: str) -> str:
    """Same-length copy of text with markup blanked out, so indices line up."""
    return PROTECTED.sub(lambda m: '\x00' * len(m.group()), text)


def truncate_hint(raw: str) -> Optional[str]:
    raw = raw.strip()
    match = NEXT_Q_PATTERN.search(mask_markup(raw), 1)
    if match:
        raw = raw[:match.start()].strip()
    return raw or None


def split_options(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Stem and lettered options. Markers count only in alphabet order starting
    at 'a', so a stray "c)" before "a)" stays in the stem.
    """
    markers = []
    expected = 0
    for match in OPTION_PATTERN.finditer(mask_markup(text)):
        if expected >= len(OPTION_LETTERS):
            break
        if match.group(1) == OPTION_LETTERS[expected]:
            markers.append(match)
            expected += 1

    if not markers:
        return text.strip(), {}

    stem = text[:markers[0].start()].strip()
    options = {}
    for i, match in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        options[match.group(1)] = text[match.end():end].strip()
    return stem, options


def split_fields(text: str) -> Dict:
    """
    Split one question blob into number / stem / options / key / hint.
    Missing markers give None fields; a missing number keeps the whole text.
    """
    text = text.strip()
    match = NUMBER_PREFIX.match(text)
    if match:
        number = int(match.group(1))
        content = text[match.end():].strip()
    else:
        number = None
        content = text

    masked = mask_markup(content)

    hint = None
    idx = masked.find(HINT_MARKER)
    if idx >= 0:
        main = content[:idx]
        hint = truncate_hint(content[idx + len(HINT_MARKER):])
    else:
        main = content

    key = None
    idx = masked[:len(main)].find(KEY_MARKER)
    if idx >= 0:
        option_text = main[:idx]
        key = main[idx + len(KEY_MARKER):].strip() or None
    else:
        option_text = main

    stem, options = split_options(option_text)
    return {
        "number": number,
        "stem": stem,
        "options": options,
        "key": key,
        "hint": hint,
    }


def process_buffer_as_question(chunks: List[str], images: Dict[str, bytes] = None) -> QuestionRecord:
    """Turn a flushed buffer into a QuestionRecord."""
    joined = " ".join(chunks).strip()
    fields = split_fields(joined)
    return QuestionRecord(images=dict(images or {}), **fields)
