"""
Onboarding form controller.

Owns field state for one form session, runs the schema on submit and
tracks the submission lifecycle:

    Idle -> Submitting -> Succeeded   (until reset)
                       -> Failed      (editable again)
"""

import copy
import logging
from datetime import date
from typing import Any, Literal

from django.utils import timezone

from onboard_schemas import OnboardingSubmission, validate
from pydantic import BaseModel, Field

from apps.web.onboarding.client import OnboardingClient
from apps.web.onboarding.exceptions import (
    FormLockedError,
    SubmissionRejectedError,
    SubmissionTransportError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Blank field state, keyed by wire name
EMPTY_VALUES: dict[str, Any] = {
    "fullName": "",
    "email": "",
    "companyName": "",
    "services": [],
    "budgetUsd": "",
    "projectStartDate": "",
    "acceptTerms": False,
}

# =============================================================================
# Submission state
# =============================================================================


class Idle(BaseModel):
    """Form is editable and nothing has been sent."""

    kind: Literal["idle"] = "idle"


class Submitting(BaseModel):
    """The request is in flight; the submit control is disabled."""

    kind: Literal["submitting"] = "submitting"
    data: OnboardingSubmission


class Succeeded(BaseModel):
    """Endpoint accepted the submission. Stays here until reset()."""

    kind: Literal["succeeded"] = "succeeded"
    data: OnboardingSubmission
    response: dict[str, Any] = Field(default_factory=dict)


class Failed(BaseModel):
    """Submission failed; form is editable again with the message shown."""

    kind: Literal["failed"] = "failed"
    message: str


SubmissionState = Idle | Submitting | Succeeded | Failed


class FormController:
    """
    Mediates between field input, the onboarding schema and the endpoint.

    At most one request is in flight: submit() is refused unless the form
    is editable (Idle or Failed).

    Usage:
        controller = FormController()
        controller.update({"fullName": "Jane Smith", ...})
        state = await controller.submit()
        if isinstance(state, Succeeded):
            ...
        controller.reset()
    """

    def __init__(
        self,
        client: OnboardingClient | None = None,
        url: str | None = None,
        today: date | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            client: Submission client. A new one is created (and closed) per
                submit when omitted.
            url: Endpoint for the per-submit client. Defaults to
                settings.ONBOARD_URL.
            today: Fixed date for the start-date rule. Defaults to the
                current local date at submit time.
        """
        self._client = client
        self._url = url
        self._today = today
        self.values: dict[str, Any] = copy.deepcopy(EMPTY_VALUES)
        self.field_errors: dict[str, str] = {}
        self.state: SubmissionState = Idle()

    @property
    def editable(self) -> bool:
        return isinstance(self.state, Idle | Failed)

    @property
    def busy(self) -> bool:
        """True while the request is in flight."""
        return isinstance(self.state, Submitting)

    @property
    def error_message(self) -> str | None:
        return self.state.message if isinstance(self.state, Failed) else None

    @property
    def submitted(self) -> OnboardingSubmission | None:
        """The accepted submission, once Succeeded."""
        return self.state.data if isinstance(self.state, Succeeded) else None

    # =========================================================================
    # Field state
    # =========================================================================

    def set_value(self, field: str, value: Any) -> None:
        """Set one field by wire name."""
        if not self.editable:
            raise FormLockedError(f"Form is not editable while {self.state.kind}")
        if field not in EMPTY_VALUES:
            raise KeyError(f"Unknown form field: {field}")
        self.values[field] = value

    def update(self, values: dict[str, Any]) -> None:
        """Set several fields at once. Nothing is changed if any key is unknown."""
        if not self.editable:
            raise FormLockedError(f"Form is not editable while {self.state.kind}")
        unknown = sorted(set(values) - set(EMPTY_VALUES))
        if unknown:
            raise KeyError(f"Unknown form fields: {', '.join(unknown)}")
        self.values.update(values)

    def reset(self) -> None:
        """Start a fresh response: blank fields, no errors, Idle."""
        if self.busy:
            raise FormLockedError("Cannot reset while a submission is in flight")
        self.values = copy.deepcopy(EMPTY_VALUES)
        self.field_errors = {}
        self.state = Idle()

    # =========================================================================
    # Submission
    # =========================================================================

    async def submit(self, raw: dict[str, Any] | None = None) -> SubmissionState:
        """
        Validate the field state and, if valid, send it.

        Args:
            raw: Optional field values merged into the current state first.

        Returns:
            The resulting state. A validation failure leaves the state as it
            was and fills field_errors; no request is made.

        Raises:
            FormLockedError: If the form is not editable.
        """
        if not self.editable:
            raise FormLockedError(f"Cannot submit while {self.state.kind}")
        if raw is not None:
            self.update(raw)

        result = validate(self.values, today=self._today or timezone.localdate())
        if result.data is None:
            self.field_errors = result.first_errors()
            logger.debug("Onboarding form invalid: %s", sorted(self.field_errors))
            return self.state

        self.field_errors = {}
        data = result.data
        self.state = Submitting(data=data)

        client = self._client
        try:
            if client is None:
                client = OnboardingClient(self._url)
            reply = await client.submit(data.to_payload())
        except SubmissionRejectedError as e:
            self.state = Failed(message=e.message)
        except SubmissionTransportError:
            self.state = Failed(message=GENERIC_ERROR_MESSAGE)
        except Exception as e:
            logger.exception("Unexpected error submitting onboarding form: %s", e)
            self.state = Failed(message=GENERIC_ERROR_MESSAGE)
        else:
            logger.info("Onboarding form submitted for %s", data.company_name)
            self.state = Succeeded(data=data, response=reply)
        finally:
            if client is not None and client is not self._client:
                await client.close()

        return self.state


def confirmation_summary(data: OnboardingSubmission) -> list[tuple[str, str]]:
    """Label/value rows shown after a successful submission."""
    rows = [
        ("Name", data.full_name),
        ("Email", data.email),
        ("Company", data.company_name),
        ("Services", ", ".join(service.value for service in data.services)),
    ]
    if data.budget_usd is not None:
        rows.append(("Budget", f"${data.budget_usd:,}"))
    start = data.project_start_date
    rows.append(("Start Date", f"{start:%B} {start.day}, {start.year}"))
    return rows
