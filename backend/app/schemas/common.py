"""Small response envelopes shared by several routers."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable result")


class CountResponse(BaseModel):
    count: int = Field(..., ge=0)
