"""Pydantic request/response schemas for the HTTP API."""

from lms.schemas.common import ApiResponse, MessageResponse, envelope

__all__ = ["ApiResponse", "MessageResponse", "envelope"]
