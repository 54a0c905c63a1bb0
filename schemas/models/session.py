"""
Session document model.

Maps to the `sessions` MongoDB collection.

token_hash stores SHA-256(token); the issued token itself is never stored.
A TTL index on created_at removes rows once the retention window has passed;
liveness checks compare against created_at as well, since the TTL monitor
only runs about once a minute.
"""

from __future__ import annotations

from datetime import datetime

from schemas.models.base import MongoBaseModel, PyObjectId


class SessionDoc(MongoBaseModel):
    """Document model for the `sessions` collection."""

    token_hash: str
    user_id: PyObjectId
    created_at: datetime
