"""Client onboarding form schema.

Field rules for the onboarding form. ``validate`` never raises for bad
input; it returns a ``ValidationResult`` carrying either the normalized
submission or the ordered list of field errors.
"""

import re
from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

# =============================================================================
# Constraints
# =============================================================================

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 80
COMPANY_MIN_LENGTH = 2
COMPANY_MAX_LENGTH = 100
BUDGET_MIN_USD = 100
BUDGET_MAX_USD = 1_000_000

NAME_PATTERN = re.compile(r"[A-Za-z\s'-]+")
ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# =============================================================================
# Messages
# =============================================================================

REQUIRED = "Required"
NAME_TOO_SHORT = f"Name must be at least {NAME_MIN_LENGTH} characters"
NAME_TOO_LONG = f"Name must be at most {NAME_MAX_LENGTH} characters"
NAME_INVALID_CHARACTERS = "Only letters, spaces, hyphens, and apostrophes allowed"
INVALID_EMAIL = "Please enter a valid email"
COMPANY_TOO_SHORT = f"Company name must be at least {COMPANY_MIN_LENGTH} characters"
COMPANY_TOO_LONG = f"Company name must be at most {COMPANY_MAX_LENGTH} characters"
NO_SERVICES = "Please select at least one service"
INVALID_SERVICE = "Please select a valid service"
BUDGET_NOT_WHOLE = "Must be a whole number"
BUDGET_TOO_LOW = f"Minimum budget is ${BUDGET_MIN_USD:,}"
BUDGET_TOO_HIGH = f"Maximum budget is ${BUDGET_MAX_USD:,}"
INVALID_DATE = "Please enter a valid date"
START_DATE_IN_PAST = "Start date must be today or in the future"
TERMS_NOT_ACCEPTED = "You must accept the terms"

# Messages for pydantic's own type errors, keyed by wire field name
_TYPE_ERROR_MESSAGES = {
    "email": INVALID_EMAIL,
    "services": INVALID_SERVICE,
    "budgetUsd": BUDGET_NOT_WHOLE,
    "projectStartDate": INVALID_DATE,
    "acceptTerms": TERMS_NOT_ACCEPTED,
}


class Service(str, Enum):
    """Services a client can ask for."""

    UI_UX = "UI/UX"
    BRANDING = "Branding"
    WEB_DEV = "Web Dev"
    MOBILE_APP = "Mobile App"


class OnboardingSubmission(BaseModel):
    """Normalized onboarding payload. Only built from input that passed every rule."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Contact info
    full_name: str
    email: EmailStr
    company_name: str

    # Project details
    services: list[Service]
    budget_usd: int | None = Field(default=None, description="Whole US dollars")
    project_start_date: date
    accept_terms: bool = Field(strict=True)

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, value: str) -> str:
        if len(value) < NAME_MIN_LENGTH:
            raise ValueError(NAME_TOO_SHORT)
        if len(value) > NAME_MAX_LENGTH:
            raise ValueError(NAME_TOO_LONG)
        if not NAME_PATTERN.fullmatch(value):
            raise ValueError(NAME_INVALID_CHARACTERS)
        return value

    @field_validator("email", mode="before")
    @classmethod
    def reject_display_name(cls, value: Any) -> Any:
        # EmailStr would accept "Jane <jane@example.com>" and keep the address
        if isinstance(value, str) and ("<" in value or ">" in value):
            raise ValueError(INVALID_EMAIL)
        return value

    @field_validator("company_name")
    @classmethod
    def check_company_name(cls, value: str) -> str:
        if len(value) < COMPANY_MIN_LENGTH:
            raise ValueError(COMPANY_TOO_SHORT)
        if len(value) > COMPANY_MAX_LENGTH:
            raise ValueError(COMPANY_TOO_LONG)
        return value

    @field_validator("services")
    @classmethod
    def check_services(cls, value: list[Service]) -> list[Service]:
        if not value:
            raise ValueError(NO_SERVICES)
        # Selection is a set; keep first-seen order
        return list(dict.fromkeys(value))

    @field_validator("budget_usd", mode="before")
    @classmethod
    def blank_budget_is_absent(cls, value: Any) -> Any:
        # An empty budget input means "no budget given", not a bad number
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValueError(BUDGET_NOT_WHOLE)
        return value

    @field_validator("budget_usd")
    @classmethod
    def check_budget(cls, value: int | None) -> int | None:
        if value is None:
            return value
        if value < BUDGET_MIN_USD:
            raise ValueError(BUDGET_TOO_LOW)
        if value > BUDGET_MAX_USD:
            raise ValueError(BUDGET_TOO_HIGH)
        return value

    @field_validator("project_start_date", mode="before")
    @classmethod
    def require_iso_date(cls, value: Any) -> Any:
        # Calendar dates only; datetime strings are not dates
        if isinstance(value, str) and not ISO_DATE_PATTERN.fullmatch(value):
            raise ValueError(INVALID_DATE)
        return value

    @field_validator("project_start_date")
    @classmethod
    def check_start_date(cls, value: date, info: ValidationInfo) -> date:
        context = info.context or {}
        today = context.get("today") or date.today()
        if value < today:
            raise ValueError(START_DATE_IN_PAST)
        return value

    @field_validator("accept_terms")
    @classmethod
    def check_terms(cls, value: bool) -> bool:
        if not value:
            raise ValueError(TERMS_NOT_ACCEPTED)
        return value

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the submission endpoint: the seven camelCase fields."""
        return self.model_dump(mode="json", by_alias=True)


class FieldError(BaseModel):
    """A validation failure for one field."""

    field: str = Field(description="Wire (camelCase) field name")
    message: str


class ValidationResult(BaseModel):
    """Outcome of ``validate``: either ``data`` or a non-empty ``errors`` list."""

    data: OnboardingSubmission | None = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.data is not None

    def first_errors(self) -> dict[str, str]:
        """First message per field, in field order."""
        first: dict[str, str] = {}
        for error in self.errors:
            first.setdefault(error.field, error.message)
        return first


def _field_error(error: Mapping[str, Any]) -> FieldError:
    """Translate one pydantic error into a FieldError."""
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else "__all__"

    ctx = error.get("ctx") or {}
    if error["type"] == "missing":
        message = REQUIRED
    elif error["type"] == "value_error" and isinstance(ctx.get("error"), ValueError):
        message = str(ctx["error"])
    elif field in _TYPE_ERROR_MESSAGES:
        message = _TYPE_ERROR_MESSAGES[field]
    else:
        message = error["msg"]

    return FieldError(field=field, message=message)


def validate(raw: Mapping[str, Any], today: date | None = None) -> ValidationResult:
    """
    Validate raw form values.

    Args:
        raw: Field values keyed by wire name (``fullName``) or attribute name
            (``full_name``). Values may be missing or of the wrong type.
        today: Date the start date is compared against. Defaults to the
            current local date.

    Returns:
        A ValidationResult. Errors are ordered by field.
    """
    try:
        data = OnboardingSubmission.model_validate(
            dict(raw), context={"today": today}
        )
    except ValidationError as exc:
        return ValidationResult(errors=[_field_error(e) for e in exc.errors()])
    return ValidationResult(data=data)
