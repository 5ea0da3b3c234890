"""DTO for the reconciliation health response."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from src.domain.entities.reconciliation import ReconciliationState


class ReconciliationHealthDTO(BaseModel):
    """DTO representing the /health response payload."""

    status: str = Field(description="'up' once live polling runs, else 'starting'")
    state: ReconciliationState = Field(description="Reconciliation state")
    cursor: Optional[int] = Field(
        default=None, description="Newest absorbed timestamp, epoch ms"
    )
    sample_count: int = Field(description="Number of buffered samples")
    oldest_timestamp_ms: Optional[int] = Field(default=None)
    newest_timestamp_ms: Optional[int] = Field(default=None)

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "up",
                "state": "live_only",
                "cursor": 1726000005000,
                "sample_count": 720,
                "oldest_timestamp_ms": 1725996410000,
                "newest_timestamp_ms": 1726000005000,
            }
        }
    }
