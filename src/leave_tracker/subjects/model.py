from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Subject:
    """Domain entity: a subject (course) that leave records refer to."""

    subject_id: int
    name: str
    created_at: Optional[datetime] = None
