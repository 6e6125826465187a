"""Row and payload builders shared by the tests."""
from datetime import datetime, timedelta
import uuid

from detection_platform.api_service.models import (
    Account,
    ApiKey,
    DetectionCache,
    DetectionResult,
    FrameAnalysis,
    Invoice,
    Payment,
    PaymentMethod,
    PricingPlan,
    Report,
    Session,
    Subscription,
    UsageLog,
    User,
    Webhook,
)


def signup_payload(**overrides):
    payload = {
        "email": "alice@example.com",
        "name": "Alice",
        "password": "correct-horse",
    }
    payload.update(overrides)
    return payload


def _suffix():
    return uuid.uuid4().hex[:8]


def make_user(**overrides):
    fields = {"email": f"user_{_suffix()}@example.com", "name": "Test User"}
    fields.update(overrides)
    return User(**fields)


def make_account(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "account_id": str(user_id),
        "provider_id": "credential",
        "provider": "email",
        "provider_account_id": str(user_id),
        "password": "hashed",
    }
    fields.update(overrides)
    return Account(**fields)


def make_session(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "token": f"token-{_suffix()}",
        "expires_at": datetime.utcnow() + timedelta(days=7),
    }
    fields.update(overrides)
    return Session(**fields)


def make_detection_result(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "video_url": "https://videos.example.com/v/123",
        "video_platform": "youtube",
        "overall_confidence": 0.91,
        "authenticity_score": 0.12,
        "status": "completed",
        "frames_analyzed": 2,
        "detection_methods_used": ["frame_classifier", "reverse_image"],
        "detailed_results": {"frame_classifier": {"score": 0.88}},
        "is_likely_ai": True,
        "confidence_level": "high",
        "processing_time_ms": 1840,
    }
    fields.update(overrides)
    return DetectionResult(**fields)


def make_frame_analysis(detection_result_id, **overrides):
    fields = {
        "detection_result_id": detection_result_id,
        "frame_number": 1,
        "frame_hash": uuid.uuid4().hex,
        "frame_timestamp_ms": 1000,
        "authenticity_score": 0.1,
        "ai_probability": 0.9,
        "provider_results": {"hive": {"ai_generated": 0.9}},
        "analysis_method": ["frame_classifier"],
        "processing_time_ms": 320,
    }
    fields.update(overrides)
    return FrameAnalysis(**fields)


def make_usage_log(user_id, **overrides):
    fields = {"user_id": user_id, "action": "detection", "ip_address": "203.0.113.7"}
    fields.update(overrides)
    return UsageLog(**fields)


def make_api_key(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "key_hash": uuid.uuid4().hex,
        "key_prefix": "dfk_live_ab",
        "name": "CI key",
        "scopes": ["detections:read"],
        "rate_limit": 60,
    }
    fields.update(overrides)
    return ApiKey(**fields)


def make_detection_cache(**overrides):
    fields = {
        "frame_hash": uuid.uuid4().hex,
        "video_hash": uuid.uuid4().hex,
        "authenticity_score": 0.2,
        "ai_probability": 0.8,
        "detection_methods": ["frame_classifier"],
        "detailed_results": {"frame_classifier": {"score": 0.8}},
        "expires_at": datetime.utcnow() + timedelta(days=1),
    }
    fields.update(overrides)
    return DetectionCache(**fields)


def make_webhook(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "url": "https://hooks.example.com/detections",
        "events": ["detection.completed"],
        "secret": "whsec_test",
    }
    fields.update(overrides)
    return Webhook(**fields)


def make_report(user_id, detection_result_id=None, **overrides):
    fields = {
        "user_id": user_id,
        "detection_result_id": detection_result_id,
        "report_type": "false_positive",
        "description": "This clip is authentic footage.",
    }
    fields.update(overrides)
    return Report(**fields)


def make_subscription(user_id, **overrides):
    now = datetime.utcnow()
    fields = {
        "user_id": user_id,
        "provider": "stripe",
        "provider_subscription_id": f"sub_{_suffix()}",
        "provider_customer_id": f"cus_{_suffix()}",
        "tier": "premium",
        "status": "active",
        "interval": "month",
        "amount": 999,
        "current_period_start": now,
        "current_period_end": now + timedelta(days=30),
    }
    fields.update(overrides)
    return Subscription(**fields)


def make_invoice(user_id, subscription_id=None, **overrides):
    fields = {
        "user_id": user_id,
        "subscription_id": subscription_id,
        "provider": "stripe",
        "provider_invoice_id": f"in_{_suffix()}",
        "status": "paid",
        "amount": 999,
        "amount_paid": 999,
    }
    fields.update(overrides)
    return Invoice(**fields)


def make_payment(user_id, invoice_id=None, **overrides):
    fields = {
        "user_id": user_id,
        "invoice_id": invoice_id,
        "provider": "stripe",
        "provider_payment_id": f"py_{_suffix()}",
        "status": "succeeded",
        "amount": 999,
        "last4": "4242",
        "brand": "visa",
    }
    fields.update(overrides)
    return Payment(**fields)


def make_payment_method(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "provider": "stripe",
        "provider_payment_method_id": f"pm_{_suffix()}",
        "type": "card",
        "last4": "4242",
        "brand": "visa",
        "expiry_month": 12,
        "expiry_year": 2030,
    }
    fields.update(overrides)
    return PaymentMethod(**fields)


def make_pricing_plan(**overrides):
    fields = {
        "name": "Premium",
        "tier": "premium",
        "monthly_price": 999,
        "yearly_price": 9990,
        "daily_checks_limit": 200,
        "monthly_checks_limit": 5000,
        "features": ["api_access", "priority_queue"],
    }
    fields.update(overrides)
    return PricingPlan(**fields)
