"""Translation key assignment policies."""

from __future__ import annotations

import uuid
from typing import Protocol

_NIL_NAMESPACE = uuid.UUID(int=0)


class KeyGetter(Protocol):
    """Decides which key stores the translation of one field."""

    def get_key(self, old_key: str, translated_text: str) -> str:
        """Return the key for ``translated_text`` given the field's previous key."""


def mint_key(text: str) -> str:
    """Return a name-based key derived from the text."""
    return str(uuid.uuid5(_NIL_NAMESPACE, text))


class SourceLanguageKeyGetter:
    """Mints a content-derived key for every field, ignoring previous keys."""

    def get_key(self, old_key: str, translated_text: str) -> str:
        return mint_key(translated_text)


class ReusingKeyGetter:
    """Reuses the previous key when one exists, otherwise mints a new one."""

    def get_key(self, old_key: str, translated_text: str) -> str:
        if old_key:
            return old_key
        return mint_key(translated_text)
