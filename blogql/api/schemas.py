"""
Pydantic schemas for REST responses.
"""

from typing import Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database_connected: bool
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None
    code: str


class ImageUploadResponse(BaseModel):
    """Result of an image upload."""
    message: str
    file_path: Optional[str] = Field(None, alias="filePath")

    model_config = {"populate_by_name": True}
