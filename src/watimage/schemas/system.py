"""
System API models.
"""

from typing import List

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Service health"""

    status: str
    version: str
    uptime: float
    formats: List[str]
