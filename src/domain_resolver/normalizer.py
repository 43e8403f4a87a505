"""
Domain name normalization.

Turns arbitrary candidate text (generator output, user input) into the
canonical key used for cache and quota bookkeeping: lowercase letters, digits
and hyphens followed by a single canonical extension.
"""

import re

import idna

from .config import DEFAULT_EXTENSION


DISALLOWED_CHARS_PATTERN = re.compile(r"[^a-z0-9-]")


def is_blank(raw: str) -> bool:
    """Return True for input that should be rejected before normalizing."""
    return not raw or not raw.strip()


def _encode_idn(name: str) -> str:
    """
    IDNA-encode a name containing non-ASCII characters.

    Falls back to the unchanged name when encoding fails; the caller's
    character stripping then applies as usual.
    """
    if all(ord(c) < 128 for c in name):
        return name
    labels = []
    for label in name.split("."):
        if not label:
            continue
        try:
            labels.append(idna.encode(label, uts46=True).decode("ascii"))
        except idna.IDNAError:
            labels.append(label)
    return ".".join(labels)


def normalize(raw: str, extension: str = DEFAULT_EXTENSION, encode_idn: bool = False) -> str:
    """
    Normalize a raw candidate into a domain key.

    Lowercases, strips one trailing ``.<extension>``, removes every character
    outside ``[a-z0-9-]`` and appends ``.<extension>``. Never fails: empty or
    fully invalid input yields ``".<extension>"``. Idempotent.

    Args:
        raw: Candidate text
        extension: Canonical extension without the leading dot
        encode_idn: IDNA-encode non-ASCII names instead of dropping the characters

    Returns:
        The normalized domain key
    """
    suffix = f".{extension.lower()}"
    name = (raw or "").lower()
    if name.endswith(suffix):
        name = name[: -len(suffix)]
    if encode_idn:
        name = _encode_idn(name)
    return DISALLOWED_CHARS_PATTERN.sub("", name) + suffix


def extension_of(domain: str) -> str:
    """Return the extension of a domain key (``'com'`` for ``'example.com'``)."""
    return domain.rsplit(".", 1)[-1].lower() if "." in domain else ""
