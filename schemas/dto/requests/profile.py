"""
Request DTOs for profile endpoints.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UpdateProfileRequest(BaseModel):
    """Request body for PUT/POST /update-profile.

    ``name`` is required by the service; the rest are optional and only
    written when present.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    # ISO 8601 date, e.g. "1990-05-17"
    birthday: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
