"""Object key layout and ownership checks for user assets."""

from __future__ import annotations

import uuid

KEY_ROOT = "user-assets"
MAX_KEY_LENGTH = 200
ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")
_FORBIDDEN_FRAGMENTS = ("..", "\\", "//")

# Canonical extension per sniffed MIME type; anything else falls back to .png.
_EXTENSION_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
}


def user_prefix(user_id: int) -> str:
    return f"{KEY_ROOT}/{user_id}/"


def extension_for(mime_type: str) -> str:
    return _EXTENSION_BY_MIME.get(mime_type, ".png")


def build_object_key(user_id: int, mime_type: str) -> str:
    return f"{user_prefix(user_id)}{uuid.uuid4()}{extension_for(mime_type)}"


class ObjectKeyAuthorizer:
    """Decides whether a caller-supplied key may be used by ``user_id``.

    A key is accepted only if it is non-empty valid UTF-8, lives directly under
    ``user-assets/{user_id}/``, contains no ``..``, backslash or ``//``, is at
    most 200 bytes long and ends in an allowed image extension. The check is
    pure; callers decide how to respond to a rejection.
    """

    def validate(self, user_id: int, key: str | None) -> bool:
        if not key or not isinstance(key, str):
            return False
        try:
            encoded = key.encode("utf-8")
        except UnicodeEncodeError:
            return False
        if not key.startswith(user_prefix(user_id)):
            return False
        if any(fragment in key for fragment in _FORBIDDEN_FRAGMENTS):
            return False
        if len(encoded) > MAX_KEY_LENGTH:
            return False
        return key.strip().lower().endswith(ALLOWED_EXTENSIONS)


__all__ = [
    "ALLOWED_EXTENSIONS",
    "MAX_KEY_LENGTH",
    "ObjectKeyAuthorizer",
    "build_object_key",
    "extension_for",
    "user_prefix",
]
