"""
Data models package for the API server.

This package contains Pydantic models for request/response validation
in the Comfy CMS API.
"""

# Import request models
from .requests import (
    ChatStatusUpdateRequest,
    ContactCreateRequest,
    ContactUpdateRequest,
    OpeningHours,
    PostCreateRequest,
    PostPublicationRequest,
    PostTagRequest,
    PostUpdateRequest,
    ReadingTagCreateRequest,
    ReadingTagUpdateRequest,
    ReferenceCreateRequest,
    ReferenceUpdateRequest,
    SendMessageRequest,
    SignedUrlRequest,
    StatusKeepaliveRequest,
    UpdatePasswordRequest,
)

# Import response models
from .responses import (
    ApiResponse,
    ChatMessage,
    ChatSummary,
    SelfTestResponse,
    SignedUrlResponse,
    UpdatePasswordResponse,
)

# Export all models for easier access
__all__ = [
    # Request models
    "ChatStatusUpdateRequest",
    "ContactCreateRequest",
    "ContactUpdateRequest",
    "OpeningHours",
    "PostCreateRequest",
    "PostPublicationRequest",
    "PostTagRequest",
    "PostUpdateRequest",
    "ReadingTagCreateRequest",
    "ReadingTagUpdateRequest",
    "ReferenceCreateRequest",
    "ReferenceUpdateRequest",
    "SendMessageRequest",
    "SignedUrlRequest",
    "StatusKeepaliveRequest",
    "UpdatePasswordRequest",
    # Response models
    "ApiResponse",
    "ChatMessage",
    "ChatSummary",
    "SelfTestResponse",
    "SignedUrlResponse",
    "UpdatePasswordResponse",
]
