"""Deterministic multipart boundaries derived from the message ID.

Rebuilding the same message must yield byte-identical output, so the
boundaries are hashes of the ID rather than random tokens.
"""

from __future__ import annotations

import hashlib

from .models import Message


def get_boundary(message: Message) -> str:
    """Boundary for the top-level multipart of *message*."""
    return hashlib.sha256(message.id.encode("utf-8")).hexdigest()


def get_related_boundary(message: Message) -> str:
    """Boundary for the ``multipart/related`` part nested inside the top level."""
    return hashlib.sha256(b"related:" + message.id.encode("utf-8")).hexdigest()
