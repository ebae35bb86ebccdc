"""Name normalization for certificate matching.

Turns recipient names and filename stems into comparable tokens: lowercase,
accent-stripped, separator-free and alphanumeric only.

Example:
    >>> from certmatch.matching import normalize
    >>> normalize("José García")
    'josegarcia'
    >>> normalize("O'Brien-Smith Jr.")
    'obriensmithjr'
"""

import re
import unicodedata
from typing import Any

_SEPARATOR_PATTERN = re.compile(r'[_\s-]+')
_NON_ALPHANUMERIC_PATTERN = re.compile(r'[^a-z0-9]')


def normalize(value: Any) -> str:
    """Normalize a name or filename stem into a comparable token.

    Steps run in a fixed order, each on the previous step's output:
    lowercase, NFD decomposition, combining mark removal, separator
    removal, non-alphanumeric removal, trim.

    Args:
        value: Any human-entered string. None and non-string values are
            accepted and yield an empty token.

    Returns:
        The normalized token, possibly empty.

    Example:
        >>> normalize("John_Doe-Smith")
        'johndoesmith'
    """
    if not value or not isinstance(value, str):
        return ""

    token = value.lower()
    token = unicodedata.normalize("NFD", token)
    token = "".join(ch for ch in token if not unicodedata.combining(ch))
    token = _SEPARATOR_PATTERN.sub("", token)
    token = _NON_ALPHANUMERIC_PATTERN.sub("", token)
    return token.strip()
