# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from api.config.settings import DEFAULT_TAG_COLOR, POST_CATEGORIES

ChatStatus = Literal["novo_chat", "a_decorrer", "follow_up", "encerrado"]


def _required_text(v, label):
    if v is None or not str(v).strip():
        raise ValueError(f"{label} cannot be empty or only whitespace")
    return str(v).strip()


def _optional_text(v, label):
    if v is None:
        return v
    return _required_text(v, label)


def _http_url(v):
    if v is None:
        return v
    v = v.strip()
    if not (v.startswith("http://") or v.startswith("https://")):
        raise ValueError("URL must start with http:// or https://")
    return v


# ============================================================
# CHAT REQUEST MODELS
# ============================================================


class SendMessageRequest(BaseModel):
    """Request model for a psychologist sending a chat message.

    The content is encrypted before it is stored.
    """

    content: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Plaintext message body",
        examples=["Olá, tudo bem?"],
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError("Message content cannot be empty or only whitespace")
        return v


class ChatStatusUpdateRequest(BaseModel):
    status: ChatStatus = Field(
        ..., description="New chat status", examples=["follow_up"]
    )


# ============================================================
# CONTACT REQUEST MODELS
# ============================================================


class OpeningPeriod(BaseModel):
    from_: str = Field(..., alias="from", examples=["09:00"])
    to: str = Field(..., examples=["18:00"])

    model_config = {"populate_by_name": True}


class OpeningHours(BaseModel):
    """Structured opening hours of a support contact."""

    days: List[str] = Field(default_factory=list, examples=[["seg", "ter", "qua"]])
    periods: List[OpeningPeriod] = Field(default_factory=list)
    raw: Optional[str] = None
    is_24h: bool = False
    is_unavailable: bool = False
    days_text: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class _ContactFields(BaseModel):
    when_to_use: Optional[str] = None
    who_attends: Optional[str] = None
    recommended_age: Optional[str] = None
    min_age: Optional[int] = Field(None, ge=0, le=120)
    max_age: Optional[int] = Field(None, ge=0, le=120)
    phone1: Optional[str] = Field(None, max_length=50)
    phone2: Optional[str] = Field(None, max_length=50)
    phone3: Optional[str] = Field(None, max_length=50)
    opening_hours: Optional[OpeningHours] = None
    more_info_url: Optional[str] = None
    emotions: Optional[List[str]] = None
    location: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    when_to_seek: Optional[str] = None
    site: Optional[str] = None

    @model_validator(mode="after")
    def validate_age_range(self):
        if self.min_age is not None and self.max_age is not None:
            if self.min_age > self.max_age:
                raise ValueError("min_age cannot be greater than max_age")
        return self


class ContactCreateRequest(_ContactFields):
    """Request model for creating a support contact shown in the app."""

    title: str = Field(..., min_length=1, max_length=200, examples=["SOS Voz Amiga"])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "SOS Voz Amiga",
                    "when_to_use": "Solidão, ansiedade, depressão",
                    "phone1": "213 544 545",
                    "opening_hours": {
                        "days": ["seg", "ter", "qua", "qui", "sex", "sab", "dom"],
                        "periods": [{"from": "15:30", "to": "00:30"}],
                    },
                    "emotions": ["tristeza", "ansiedade"],
                }
            ]
        }
    }

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _required_text(v, "Title")


class ContactUpdateRequest(_ContactFields):
    """Partial update: only fields present in the body are written."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _optional_text(v, "Title")


# ============================================================
# REFERENCE REQUEST MODELS
# ============================================================


class ReferenceCreateRequest(BaseModel):
    subject: str = Field(..., min_length=1, max_length=200, examples=["Ansiedade"])
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    url: str = Field(..., examples=["https://www.sns24.gov.pt/"])

    @field_validator("subject", "title", "description")
    @classmethod
    def validate_text(cls, v, info):
        return _required_text(v, info.field_name.capitalize())

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        return _http_url(v)


class ReferenceUpdateRequest(BaseModel):
    subject: Optional[str] = Field(None, max_length=200)
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    url: Optional[str] = None

    @field_validator("subject", "title", "description")
    @classmethod
    def validate_text(cls, v, info):
        return _optional_text(v, info.field_name.capitalize())

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        return _http_url(v)


# ============================================================
# PSYCHOLOGIST AND ADMIN REQUEST MODELS
# ============================================================


class StatusKeepaliveRequest(BaseModel):
    psicologo_id: Optional[str] = None
    new_status: bool = False


class UpdatePasswordRequest(BaseModel):
    """Request model for a CMS admin resetting a psychologist's password."""

    user_id: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v):
        return _required_text(v, "User ID")


class SignedUrlRequest(BaseModel):
    path: Optional[str] = None
    expires: int = Field(3600, ge=1, le=60 * 60 * 24 * 7)


# ============================================================
# POST AND READING TAG REQUEST MODELS
# ============================================================


class PostCreateRequest(BaseModel):
    """Request model for creating a content post.

    Either content_url (external media) or file_path (uploaded file in the
    posts bucket) must be provided.
    """

    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    category: str = Field(..., examples=["Vídeo"])
    content: Optional[str] = None
    content_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    emotion_tags: List[str] = Field(default_factory=list)
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v, info):
        return _required_text(v, info.field_name.capitalize())

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        if v not in POST_CATEGORIES:
            raise ValueError(f"Category must be one of: {', '.join(POST_CATEGORIES)}")
        return v

    @field_validator("content_url")
    @classmethod
    def validate_content_url(cls, v):
        if v is not None and not v.strip():
            return None
        return _http_url(v)

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_media_source(self):
        if not self.content_url and not self.file_path:
            raise ValueError("Either content_url or file_path is required")
        return self


class PostUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    category: Optional[str] = None
    content: Optional[str] = None
    content_url: Optional[str] = None
    tags: Optional[List[str]] = None
    emotion_tags: Optional[List[str]] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v, info):
        return _optional_text(v, info.field_name.capitalize())

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        if v is not None and v not in POST_CATEGORIES:
            raise ValueError(f"Category must be one of: {', '.join(POST_CATEGORIES)}")
        return v

    @field_validator("content_url")
    @classmethod
    def validate_content_url(cls, v):
        if v is not None and not v.strip():
            return None
        return _http_url(v)


class PostPublicationRequest(BaseModel):
    publish: bool


class ReadingTagCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    color: str = Field(DEFAULT_TAG_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_text(v, "Tag name")


class ReadingTagUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _optional_text(v, "Tag name")


class PostTagRequest(BaseModel):
    tag_id: str = Field(..., min_length=1)
