"""
Text normalization shared by the keyword and semantic matchers.
"""

import re
import unicodedata

# Letters NFKD does not decompose into a base letter plus a mark
_LIGATURES = str.maketrans({
    'œ': 'oe',
    'æ': 'ae',
    'ß': 'ss',
    'ø': 'o',
    'ł': 'l',
    'đ': 'd',
})

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def normalize_text(value) -> str:
    """
    Lowercase, fold accents and punctuation for comparison.

    "L'Œuvre — libérée !" -> "l oeuvre liberee". Anything that is not a
    string normalizes to "". The result is stable: normalizing it again
    returns it unchanged.
    """
    if not isinstance(value, str) or not value:
        return ''

    text = value.lower().translate(_LIGATURES)
    decomposed = unicodedata.normalize('NFKD', text)
    folded = ''.join(c for c in decomposed if not unicodedata.combining(c))
    # NFKD can expand characters into uppercase forms (e.g. "ǅ")
    folded = folded.lower().translate(_LIGATURES)

    return _NON_ALNUM.sub(' ', folded).strip()
