"""Shared utilities for ORM models and record ids."""

import uuid


def generate_uuid() -> str:
    """Generate a UUID string (store rows and account ids)."""
    return str(uuid.uuid4())
