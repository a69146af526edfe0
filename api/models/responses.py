# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from typing import Any, List, Optional

from pydantic import BaseModel, Field

# ==============================================================================
# RESPONSE MODELS - PYDANTIC SCHEMAS FOR API SERIALIZATION
# ==============================================================================


class ApiResponse(BaseModel):
    """Generic envelope used by the CMS CRUD routes.

    Example Response:
        {"success": true, "data": {...}, "message": "Contact created"}
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None


class ChatMessage(BaseModel):
    """A chat message as served to the conversation view.

    `content` is always the display form: decrypted text, legacy plaintext,
    or the undecryptable placeholder.
    """

    id: str
    chat_id: str
    sender_id: Optional[str] = None
    sender_type: str = Field(description="psicologo | app_user")
    content: Optional[str] = None
    created_at: Optional[str] = None
    is_read: bool = False
    is_deleted: bool = False

    model_config = {"extra": "allow"}


class ChatSummary(BaseModel):
    """Row of the psychologist chat list, with a decrypted preview."""

    id: str
    app_user_id: Optional[str] = None
    app_user_name: Optional[str] = None
    psicologo_id: Optional[str] = None
    status: Optional[str] = None
    is_active: Optional[bool] = None
    last_message_at: Optional[str] = None
    last_message_content: Optional[str] = None
    last_message_sender_type: Optional[str] = None
    unread_count_psicologo: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"extra": "allow"}


class SelfTestCheck(BaseModel):
    name: str
    passed: bool
    error: Optional[str] = None


class SelfTestResponse(BaseModel):
    success: bool
    tests: List[SelfTestCheck]


class SignedUrlResponse(BaseModel):
    url: str


class UpdatePasswordResponse(BaseModel):
    success: bool = True
    message: str
    user_id: str
    user_name: Optional[str] = None
    created: Optional[bool] = None
