"""Filename decomposition for certificate matching.

This module provides the FilenameDecomposer class which reduces a
certificate filename to the name token it most likely identifies. The
extension is removed, then "noise words" such as ``certificate`` or
``diploma`` are stripped repeatedly until the filename stops changing,
and the remainder is normalized.

Example:
    >>> from certmatch.matching import FilenameDecomposer
    >>> decomposer = FilenameDecomposer()
    >>> decomposer.extract_name_token("Certificate_Document_John_Doe.pdf")
    'johndoe'
    >>> custom = decomposer.with_noise_words(["attestation"])
    >>> custom.extract_name_token("Attestation-Jane-Smith.PDF")
    'janesmith'
"""

import re
from typing import Any, Iterable, Sequence, Tuple

from .normalizer import normalize

# Common certificate file naming conventions, checked in this order
DEFAULT_NOISE_WORDS: Tuple[str, ...] = (
    "certificate",
    "cert",
    "document",
    "doc",
    "diploma",
    "award",
    "completion",
    "certificate_of",
    "certificate-",
    "cert_",
    "cert-",
    "diploma_of",
    "diploma-",
)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".pdf",)

# Separator run that bounds a noise word
_SEPARATOR = r'[_\s-]+'
_WHITESPACE_PATTERN = re.compile(r'\s+')


class FilenameDecomposer:
    """Extracts the recipient name token from a certificate filename.

    The noise-word vocabulary and the recognised extensions are
    constructor parameters, so new naming conventions can be supported
    without touching the scanning algorithm. Instances are immutable
    after construction and safe to share between threads.

    Attributes:
        noise_words: Ordered tuple of words stripped from filenames.
        extensions: Lowercase file extensions removed from the end of a
            filename, each including the leading dot.
    """

    def __init__(
        self,
        noise_words: Iterable[str] = DEFAULT_NOISE_WORDS,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        """Initialize the FilenameDecomposer.

        Args:
            noise_words: Words to strip from filenames. Duplicates are
                dropped while keeping first-seen order.
            extensions: Extensions to strip, e.g. ``(".pdf",)``. A missing
                leading dot is added.

        Raises:
            ValueError: If a noise word or extension is empty.
        """
        words = []
        for word in noise_words:
            if not word or not word.strip():
                raise ValueError("Noise words must be non-empty strings")
            word = word.strip().lower()
            if word not in words:
                words.append(word)

        exts = []
        for ext in extensions:
            ext = ext.strip().lower()
            if not ext or ext == ".":
                raise ValueError("Extensions must be non-empty strings")
            if not ext.startswith("."):
                ext = "." + ext
            if ext not in exts:
                exts.append(ext)

        self.noise_words: Tuple[str, ...] = tuple(words)
        self.extensions: Tuple[str, ...] = tuple(exts)
        self._noise_pattern = self._compile_noise_pattern(self.noise_words)

    @staticmethod
    def _compile_noise_pattern(words: Sequence[str]):
        """Build one case-insensitive alternation for all noise words.

        Each word must be bounded on both sides by a separator run or a
        string boundary, so ``cert`` never matches inside ``Albert``.
        """
        if not words:
            return None
        alternatives = [
            f"(?:^|{_SEPARATOR}){re.escape(word)}(?:{_SEPARATOR}|$)"
            for word in words
        ]
        return re.compile("|".join(alternatives), re.IGNORECASE)

    def with_noise_words(self, extra_words: Iterable[str]) -> "FilenameDecomposer":
        """Return a new decomposer whose vocabulary is extended with extra_words."""
        return FilenameDecomposer(
            noise_words=list(self.noise_words) + list(extra_words),
            extensions=self.extensions,
        )

    def has_extension(self, filename: str) -> bool:
        """Check whether filename ends with one of the recognised extensions."""
        if not filename or not isinstance(filename, str):
            return False
        lowered = filename.lower()
        return any(lowered.endswith(ext) for ext in self.extensions)

    def strip_extension(self, filename: Any) -> str:
        """Remove a trailing recognised extension, case-insensitively.

        Args:
            filename: The raw filename.

        Returns:
            The filename without its extension, or the filename unchanged
            if it has none. Non-string input yields an empty string.
        """
        if not filename or not isinstance(filename, str):
            return ""
        lowered = filename.lower()
        for ext in self.extensions:
            if lowered.endswith(ext):
                return filename[: -len(ext)]
        return filename

    def strip_noise_words(self, stem: str) -> str:
        """Remove noise words from a filename stem until it stops changing.

        Every bounded occurrence is replaced with a single space per pass;
        stacked prefixes such as ``Certificate_Document_`` need one pass
        per word because the separator between them is consumed by the
        first match.

        Args:
            stem: Filename without extension.

        Returns:
            The stem with noise words removed and whitespace collapsed.
        """
        if self._noise_pattern is None:
            return stem

        previous = None
        while previous != stem:
            previous = stem
            stem = self._noise_pattern.sub(" ", stem)
            stem = _WHITESPACE_PATTERN.sub(" ", stem).strip()
        return stem

    def extract_name_token(self, filename: Any) -> str:
        """Extract the normalized name token from a certificate filename.

        Args:
            filename: Raw filename, with or without extension.

        Returns:
            The normalized token, or an empty string when nothing
            identifying remains (e.g. ``"Certificate.pdf"``).

        Example:
            >>> FilenameDecomposer().extract_name_token("Cert_José_García.pdf")
            'josegarcia'
        """
        stem = self.strip_extension(filename)
        if not stem:
            return ""
        return normalize(self.strip_noise_words(stem))

    def __repr__(self) -> str:
        return (
            f"FilenameDecomposer(noise_words={list(self.noise_words)!r}, "
            f"extensions={list(self.extensions)!r})"
        )


_default_decomposer = FilenameDecomposer()


def extract_name_token(filename: Any) -> str:
    """Extract a name token using the default noise-word vocabulary."""
    return _default_decomposer.extract_name_token(filename)
