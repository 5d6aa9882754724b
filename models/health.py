from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field


class Health(BaseModel):
    status: int = Field(..., description="HTTP-style status code of the service")
    status_message: str = Field(..., description="Human readable status")
    timestamp: str = Field(..., description="UTC timestamp of the check")
    ip_address: str = Field(..., description="Address of the responding host")
    echo: Optional[str] = Field(None, description="Echo of the ?echo= query parameter")
    path_echo: Optional[str] = Field(None, description="Echo of the path parameter")
    conventions: list[str] = Field(
        default_factory=list,
        description="Media types of the hypermedia conventions this server renders"
    )
