"""Onboard Schemas - Pydantic models for the onboarding data contract."""

from onboard_schemas.onboarding import (
    FieldError,
    OnboardingSubmission,
    Service,
    ValidationResult,
    validate,
)

__all__ = [
    "FieldError",
    "OnboardingSubmission",
    "Service",
    "ValidationResult",
    "validate",
]
