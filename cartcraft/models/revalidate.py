"""Revalidation and error payloads"""

from pydantic import BaseModel


class RevalidateResponse(BaseModel):
    """Acknowledgement of a page invalidation"""
    invalidated: bool = True
    path: str
    # Milliseconds since the epoch
    timestamp: int


class ErrorResponse(BaseModel):
    """Error payload returned for every failed request"""
    error: str
