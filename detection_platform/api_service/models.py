from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    DateTime,
    Text,
    Enum,
    Index,
    JSON,
    Float,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from .db import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Enum value sets. These are part of the on-disk contract.
USER_TIERS = ("free", "premium", "enterprise")
SUBSCRIPTION_STATUSES = ("active", "canceled", "past_due", "trialing")
DETECTION_STATUSES = ("processing", "completed", "failed")
CONFIDENCE_LEVELS = ("low", "medium", "high", "very_high")
PROVIDERS = ("email", "google", "github", "microsoft")
ACTIONS = ("detection", "api_call", "export", "share")
REPORT_TYPES = ("false_positive", "false_negative", "bug", "other")
REPORT_STATUSES = ("pending", "reviewed", "resolved", "dismissed")
PAYMENT_PROVIDERS = ("stripe", "paypal", "paddle")
SUBSCRIPTION_INTERVALS = ("month", "year")
INVOICE_STATUSES = ("draft", "open", "paid", "void", "uncollectible")
PAYMENT_STATUSES = ("succeeded", "pending", "failed", "refunded", "canceled")

user_tier_enum = Enum(*USER_TIERS, name="user_tier")
subscription_status_enum = Enum(*SUBSCRIPTION_STATUSES, name="subscription_status")
payment_provider_enum = Enum(*PAYMENT_PROVIDERS, name="payment_provider")


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    name = Column(String(255))
    avatar_url = Column(Text)

    # Subscription
    tier = Column(user_tier_enum, default="free", nullable=False)
    subscription_status = Column(subscription_status_enum)
    subscription_id = Column(String(255))
    subscription_expires_at = Column(DateTime)

    # Usage tracking, reset by a scheduler outside this service
    daily_checks_used = Column(Integer, default=0, nullable=False)
    daily_checks_limit = Column(Integer, default=20, nullable=False)
    monthly_checks_used = Column(Integer, default=0, nullable=False)
    last_reset_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    preferences = Column(JSONType)
    timezone = Column(String(50))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime)

    # Children are removed by ON DELETE CASCADE in the database
    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    detection_results = relationship("DetectionResult", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    usage_logs = relationship("UsageLog", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    api_keys = relationship("ApiKey", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    webhooks = relationship("Webhook", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    reports = relationship("Report", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    subscriptions = relationship("Subscription", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    invoices = relationship("Invoice", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    payments = relationship("Payment", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    payment_methods = relationship("PaymentMethod", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("users_email_idx", "email", unique=True),
        Index("users_tier_idx", "tier"),
    )


class Account(Base):
    """Identity-provider linkage for a user. Email sign-up stores the password hash here."""
    __tablename__ = "accounts"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column("accountId", Text, nullable=False)
    provider_id = Column("providerId", Text, nullable=False)
    id_token = Column("idToken", Text)
    password = Column(Text)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    provider = Column(Enum(*PROVIDERS, name="provider"))
    provider_account_id = Column(String(255))
    access_token = Column(Text)
    refresh_token = Column(Text)
    expires_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="accounts")

    __table_args__ = (
        Index("accounts_user_id_idx", "user_id"),
        Index("accounts_provider_account_idx", "provider", "provider_account_id", unique=True),
    )


class Session(Base):
    __tablename__ = "sessions"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    ip_address = Column(String(45))
    user_agent = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("sessions_token_idx", "token", unique=True),
        Index("sessions_user_id_idx", "user_id"),
        Index("sessions_expires_at_idx", "expires_at"),
    )


class DetectionResult(Base):
    __tablename__ = "detection_results"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Video/source info
    video_url = Column(Text)
    video_title = Column(Text)
    video_platform = Column(String(50))
    page_url = Column(Text)

    overall_confidence = Column(Float, nullable=False)
    authenticity_score = Column(Float, nullable=False)
    status = Column(Enum(*DETECTION_STATUSES, name="detection_status"), default="processing", nullable=False)

    frames_analyzed = Column(Integer, nullable=False)
    detection_methods_used = Column(JSONType, nullable=False)
    detailed_results = Column(JSONType, nullable=False)

    is_likely_ai = Column(Boolean, nullable=False)
    confidence_level = Column(Enum(*CONFIDENCE_LEVELS, name="confidence_level"), nullable=False)
    warning_flags = Column(JSONType)

    processing_time_ms = Column(Integer, nullable=False)
    api_costs = Column(Float)

    # User actions
    user_feedback = Column(String(50))
    user_notes = Column(Text)
    is_bookmarked = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="detection_results")
    frame_analyses = relationship("FrameAnalysis", back_populates="detection_result", cascade="all, delete-orphan", passive_deletes=True)
    # reports.detection_result_id is SET NULL on delete, so no delete cascade here
    reports = relationship("Report", back_populates="detection_result", passive_deletes=True)

    __table_args__ = (
        Index("detection_results_user_created_idx", "user_id", "created_at"),
        Index("detection_results_status_idx", "status"),
        Index("detection_results_bookmarked_idx", "user_id", "is_bookmarked"),
    )


class FrameAnalysis(Base):
    __tablename__ = "frame_analyses"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    detection_result_id = Column(Uuid, ForeignKey("detection_results.id", ondelete="CASCADE"), nullable=False)

    frame_number = Column(Integer, nullable=False)
    frame_hash = Column(String(64), nullable=False)
    frame_timestamp_ms = Column(Integer, nullable=False)

    authenticity_score = Column(Float, nullable=False)
    ai_probability = Column(Float, nullable=False)

    provider_results = Column(JSONType, nullable=False)

    detected_artifacts = Column(JSONType)
    reverse_image_matches = Column(JSONType)

    analysis_method = Column(JSONType, nullable=False)
    processing_time_ms = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    detection_result = relationship("DetectionResult", back_populates="frame_analyses")

    __table_args__ = (
        Index("frame_analyses_detection_result_idx", "detection_result_id"),
        Index("frame_analyses_frame_hash_idx", "frame_hash"),
    )


class UsageLog(Base):
    """Append-only record of a billable or rate-limited action."""
    __tablename__ = "usage_logs"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    action = Column(Enum(*ACTIONS, name="action"), nullable=False)
    resource_type = Column(String(50))
    resource_id = Column(Uuid)

    ip_address = Column(String(45), nullable=False)
    user_agent = Column(Text)
    endpoint = Column(String(255))

    credits_used = Column(Integer, default=1, nullable=False)
    api_cost = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="usage_logs")

    __table_args__ = (
        Index("usage_logs_user_created_idx", "user_id", "created_at"),
        Index("usage_logs_action_idx", "action"),
    )


class ApiKey(Base):
    __tablename__ = "api_keys"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    key_hash = Column(String(255), nullable=False)
    key_prefix = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)

    scopes = Column(JSONType, nullable=False)
    rate_limit = Column(Integer, nullable=False)

    last_used_at = Column(DateTime)
    requests_count = Column(Integer, default=0, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="api_keys")

    __table_args__ = (
        Index("api_keys_key_hash_idx", "key_hash", unique=True),
        Index("api_keys_user_id_idx", "user_id"),
    )


class DetectionCache(Base):
    """Persisted TTL memo of detection outcomes, keyed by frame hash."""
    __tablename__ = "detection_cache"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    frame_hash = Column(String(64), nullable=False)
    video_hash = Column(String(64))

    authenticity_score = Column(Float, nullable=False)
    ai_probability = Column(Float, nullable=False)
    detection_methods = Column(JSONType, nullable=False)
    detailed_results = Column(JSONType, nullable=False)

    times_accessed = Column(Integer, default=1, nullable=False)
    last_accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("detection_cache_frame_hash_idx", "frame_hash", unique=True),
        Index("detection_cache_video_hash_idx", "video_hash"),
        Index("detection_cache_expires_at_idx", "expires_at"),
    )


class Webhook(Base):
    __tablename__ = "webhooks"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    url = Column(Text, nullable=False)
    events = Column(JSONType, nullable=False)
    secret = Column(String(255), nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    last_triggered_at = Column(DateTime)
    failure_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="webhooks")

    __table_args__ = (
        Index("webhooks_user_id_idx", "user_id"),
    )


class Report(Base):
    __tablename__ = "reports"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    detection_result_id = Column(Uuid, ForeignKey("detection_results.id", ondelete="SET NULL"))

    report_type = Column(Enum(*REPORT_TYPES, name="report_type"), nullable=False)
    description = Column(Text, nullable=False)

    status = Column(Enum(*REPORT_STATUSES, name="report_status"), default="pending", nullable=False)
    admin_notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="reports")
    detection_result = relationship("DetectionResult", back_populates="reports")

    __table_args__ = (
        Index("reports_user_id_idx", "user_id"),
        Index("reports_status_idx", "status"),
    )


# ---------------- Billing ----------------
# Amounts are integer minor currency units (cents).

class Subscription(Base):
    __tablename__ = "subscriptions"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    provider = Column(payment_provider_enum, nullable=False)
    provider_subscription_id = Column(String(255), nullable=False)
    provider_customer_id = Column(String(255), nullable=False)
    provider_price_id = Column(String(255))

    tier = Column(user_tier_enum, nullable=False)
    status = Column(subscription_status_enum, nullable=False)
    interval = Column(Enum(*SUBSCRIPTION_INTERVALS, name="subscription_interval"), nullable=False)

    amount = Column(Integer, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)

    current_period_start = Column(DateTime, nullable=False)
    current_period_end = Column(DateTime, nullable=False)
    cancel_at = Column(DateTime)
    canceled_at = Column(DateTime)
    ended_at = Column(DateTime)
    trial_start = Column(DateTime)
    trial_end = Column(DateTime)

    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSONType)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="subscriptions")
    invoices = relationship("Invoice", back_populates="subscription", passive_deletes=True)

    __table_args__ = (
        Index("subscriptions_user_id_idx", "user_id"),
        Index("subscriptions_provider_sub_id_idx", "provider_subscription_id", unique=True),
        Index("subscriptions_status_idx", "status"),
        Index("subscriptions_current_period_end_idx", "current_period_end"),
    )


class Invoice(Base):
    __tablename__ = "invoices"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    subscription_id = Column(Uuid, ForeignKey("subscriptions.id", ondelete="SET NULL"))

    provider = Column(payment_provider_enum, nullable=False)
    provider_invoice_id = Column(String(255), nullable=False)

    status = Column(Enum(*INVOICE_STATUSES, name="invoice_status"), nullable=False)
    amount = Column(Integer, nullable=False)
    amount_paid = Column(Integer, default=0, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)

    invoice_number = Column(String(100))
    invoice_pdf = Column(Text)
    hosted_invoice_url = Column(Text)

    period_start = Column(DateTime)
    period_end = Column(DateTime)
    due_date = Column(DateTime)
    paid_at = Column(DateTime)

    extra_metadata = Column("metadata", JSONType)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="invoices")
    subscription = relationship("Subscription", back_populates="invoices")
    payments = relationship("Payment", back_populates="invoice", passive_deletes=True)

    __table_args__ = (
        Index("invoices_user_id_idx", "user_id"),
        Index("invoices_subscription_id_idx", "subscription_id"),
        Index("invoices_provider_invoice_id_idx", "provider_invoice_id", unique=True),
        Index("invoices_status_idx", "status"),
        Index("invoices_created_at_idx", "created_at"),
    )


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    invoice_id = Column(Uuid, ForeignKey("invoices.id", ondelete="SET NULL"))

    provider = Column(payment_provider_enum, nullable=False)
    provider_payment_id = Column(String(255), nullable=False)
    provider_payment_intent_id = Column(String(255))

    status = Column(Enum(*PAYMENT_STATUSES, name="payment_status"), nullable=False)
    amount = Column(Integer, nullable=False)
    amount_refunded = Column(Integer, default=0, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)

    payment_method = Column(String(50))
    last4 = Column("last_4", String(4))
    brand = Column(String(50))

    description = Column(Text)
    receipt_url = Column(Text)

    refund_reason = Column(Text)
    refunded_at = Column(DateTime)

    extra_metadata = Column("metadata", JSONType)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="payments")
    invoice = relationship("Invoice", back_populates="payments")

    __table_args__ = (
        Index("payments_user_id_idx", "user_id"),
        Index("payments_invoice_id_idx", "invoice_id"),
        Index("payments_provider_payment_id_idx", "provider_payment_id", unique=True),
        Index("payments_status_idx", "status"),
        Index("payments_created_at_idx", "created_at"),
    )


class PricingPlan(Base):
    __tablename__ = "pricing_plans"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(100), nullable=False)
    tier = Column(user_tier_enum, nullable=False)
    description = Column(Text)

    monthly_price = Column(Integer, nullable=False)
    yearly_price = Column(Integer, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)

    daily_checks_limit = Column(Integer, nullable=False)
    monthly_checks_limit = Column(Integer, nullable=False)
    features = Column(JSONType, nullable=False)

    stripe_price_id_monthly = Column(String(255))
    stripe_price_id_yearly = Column(String(255))

    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("pricing_plans_tier_idx", "tier", unique=True),
        Index("pricing_plans_is_active_idx", "is_active"),
    )


class PaymentMethod(Base):
    __tablename__ = "payment_methods"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    provider = Column(payment_provider_enum, nullable=False)
    provider_payment_method_id = Column(String(255), nullable=False)

    type = Column(String(50), nullable=False)
    last4 = Column("last_4", String(4))
    brand = Column(String(50))
    expiry_month = Column(Integer)
    expiry_year = Column(Integer)

    is_default = Column(Boolean, default=False, nullable=False)
    is_expired = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="payment_methods")

    __table_args__ = (
        Index("payment_methods_user_id_idx", "user_id"),
        Index("payment_methods_provider_payment_method_id_idx", "provider_payment_method_id", unique=True),
    )
