"""
Pydantic schemas for API request validation and response shaping
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Any, List, Literal, Optional
from datetime import datetime
import uuid


# ---------------- Requests ----------------

class SignUpEmail(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=48)
    name: str = Field(..., min_length=3)


class SignInEmail(BaseModel):
    email: EmailStr
    password: str


# ---------------- Auth responses ----------------

class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    email_verified: bool
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    tier: Literal["free", "premium", "enterprise"]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SessionOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SignUpResult(BaseModel):
    user: UserOut


class SignInResult(BaseModel):
    user: UserOut
    token: str


class SessionResponse(BaseModel):
    user: UserOut
    session: SessionOut


class ErrorResponse(BaseModel):
    """
    Schema for error responses.
    """
    detail: str = Field(..., description="Error message")
    error_type: Optional[str] = Field(None, description="Type of error")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": "User already exists",
                    "error_type": "USER_ALREADY_EXISTS"
                }
            ]
        }
    }


# ---------------- Detection domain rows ----------------

class DetectionResultOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    video_url: Optional[str] = None
    video_title: Optional[str] = None
    video_platform: Optional[str] = None
    page_url: Optional[str] = None
    overall_confidence: float
    authenticity_score: float
    status: Literal["processing", "completed", "failed"]
    frames_analyzed: int
    detection_methods_used: Any
    detailed_results: Any
    is_likely_ai: bool
    confidence_level: Literal["low", "medium", "high", "very_high"]
    warning_flags: Optional[Any] = None
    processing_time_ms: int
    api_costs: Optional[float] = None
    user_feedback: Optional[str] = None
    user_notes: Optional[str] = None
    is_bookmarked: bool
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FrameAnalysisOut(BaseModel):
    id: uuid.UUID
    detection_result_id: uuid.UUID
    frame_number: int
    frame_hash: str
    frame_timestamp_ms: int
    authenticity_score: float
    ai_probability: float
    provider_results: Any
    detected_artifacts: Optional[Any] = None
    reverse_image_matches: Optional[Any] = None
    analysis_method: Any
    processing_time_ms: int
    created_at: datetime

    model_config = {"from_attributes": True}


class UsageLogOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    action: Literal["detection", "api_call", "export", "share"]
    resource_type: Optional[str] = None
    resource_id: Optional[uuid.UUID] = None
    ip_address: str
    user_agent: Optional[str] = None
    endpoint: Optional[str] = None
    credits_used: int
    api_cost: Optional[float] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ApiKeyOut(BaseModel):
    """API key as shown to its owner. The hash never leaves the service."""
    id: uuid.UUID
    user_id: uuid.UUID
    key_prefix: str
    name: str
    scopes: List[str]
    rate_limit: int
    last_used_at: Optional[datetime] = None
    requests_count: int
    is_active: bool
    expires_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DetectionCacheOut(BaseModel):
    id: uuid.UUID
    frame_hash: str
    video_hash: Optional[str] = None
    authenticity_score: float
    ai_probability: float
    detection_methods: Any
    detailed_results: Any
    times_accessed: int
    last_accessed_at: datetime
    expires_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class WebhookOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    url: str
    events: List[str]
    is_active: bool
    last_triggered_at: Optional[datetime] = None
    failure_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    detection_result_id: Optional[uuid.UUID] = None
    report_type: Literal["false_positive", "false_negative", "bug", "other"]
    description: str
    status: Literal["pending", "reviewed", "resolved", "dismissed"]
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
