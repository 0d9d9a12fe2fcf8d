"""Tests for FormController - submission lifecycle against a mocked endpoint."""

import json
from datetime import timedelta
from unittest.mock import patch

from django.utils import timezone

import httpx
import pytest
import respx
from onboard_schemas import Service

from apps.web.onboarding.client import OnboardingClient
from apps.web.onboarding.controller import (
    EMPTY_VALUES,
    GENERIC_ERROR_MESSAGE,
    Failed,
    FormController,
    Idle,
    Submitting,
    Succeeded,
    confirmation_summary,
)
from apps.web.onboarding.exceptions import FormLockedError
from apps.web.onboarding.tests.factories import OnboardingValuesFactory


@pytest.fixture
def controller(onboard_url: str) -> FormController:
    client = OnboardingClient(onboard_url, http_client=httpx.AsyncClient())
    return FormController(client=client)


def echo_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "status": "success",
            "message": "Form submitted successfully (mock response)",
            "data": json.loads(request.content),
        },
    )


class TestInitialState:
    def test_starts_idle_with_blank_fields(self, controller):
        assert isinstance(controller.state, Idle)
        assert controller.values == EMPTY_VALUES
        assert controller.field_errors == {}
        assert controller.editable
        assert not controller.busy

    def test_values_are_independent_of_defaults(self, controller):
        controller.values["services"].append("UI/UX")

        assert EMPTY_VALUES["services"] == []

    def test_set_value_rejects_unknown_field(self, controller):
        with pytest.raises(KeyError):
            controller.set_value("phone", "555-1234")

    def test_update_with_unknown_field_changes_nothing(self, controller):
        with pytest.raises(KeyError, match="phone"):
            controller.update({"fullName": "Jane Smith", "phone": "555-1234"})

        assert controller.values == EMPTY_VALUES

    @pytest.mark.asyncio
    async def test_submit_with_unknown_field_changes_nothing(self, controller):
        with pytest.raises(KeyError):
            await controller.submit({**OnboardingValuesFactory(), "phone": "1"})

        assert controller.values == EMPTY_VALUES
        assert isinstance(controller.state, Idle)


class TestSuccessfulSubmission:
    @pytest.mark.asyncio
    @respx.mock
    async def test_valid_data_reaches_success(self, controller, onboard_url):
        """Valid data goes Idle -> Submitting -> Succeeded with the same values."""
        route = respx.post(onboard_url).mock(side_effect=echo_response)
        values = OnboardingValuesFactory()

        state = await controller.submit(values)

        assert route.call_count == 1
        assert isinstance(state, Succeeded)
        assert controller.state is state
        assert state.data.full_name == "Jane Smith"
        assert state.data.email == "jane@example.com"
        assert state.data.company_name == "Acme Corp"
        assert state.data.services == [Service.UI_UX]
        assert state.data.budget_usd == 1000
        assert state.data.project_start_date.isoformat() == values["projectStartDate"]
        assert state.response["data"] == state.data.to_payload()
        assert controller.submitted == state.data

    @pytest.mark.asyncio
    @respx.mock
    async def test_is_submitting_while_request_in_flight(
        self, controller, onboard_url
    ):
        seen = []

        def capture_state(request: httpx.Request) -> httpx.Response:
            seen.append((controller.state, controller.busy, controller.editable))
            return echo_response(request)

        respx.post(onboard_url).mock(side_effect=capture_state)

        await controller.submit(OnboardingValuesFactory())

        state, busy, editable = seen[0]
        assert isinstance(state, Submitting)
        assert busy
        assert not editable

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_all_seven_fields(self, controller, onboard_url):
        route = respx.post(onboard_url).mock(side_effect=echo_response)

        await controller.submit(OnboardingValuesFactory(budgetUsd=""))

        body = json.loads(route.calls.last.request.content)
        assert set(body) == {
            "fullName",
            "email",
            "companyName",
            "services",
            "budgetUsd",
            "projectStartDate",
            "acceptTerms",
        }
        assert body["budgetUsd"] is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_form_stays_locked_until_reset(self, controller, onboard_url):
        respx.post(onboard_url).mock(side_effect=echo_response)
        await controller.submit(OnboardingValuesFactory())

        assert not controller.editable
        with pytest.raises(FormLockedError):
            await controller.submit()
        with pytest.raises(FormLockedError):
            controller.set_value("fullName", "John Doe")

    @pytest.mark.asyncio
    @respx.mock
    async def test_reset_returns_to_blank_idle_form(self, controller, onboard_url):
        respx.post(onboard_url).mock(side_effect=echo_response)
        await controller.submit(OnboardingValuesFactory())

        controller.reset()

        assert isinstance(controller.state, Idle)
        assert controller.values == EMPTY_VALUES
        assert controller.field_errors == {}
        assert controller.submitted is None
        assert controller.editable


class TestValidationFailure:
    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_no_request_when_services_empty(self, controller, onboard_url):
        route = respx.post(onboard_url).mock(side_effect=echo_response)

        state = await controller.submit(OnboardingValuesFactory(services=[]))

        assert not route.called
        assert isinstance(state, Idle)
        assert controller.field_errors == {
            "services": "Please select at least one service"
        }
        assert controller.editable

    @pytest.mark.asyncio
    async def test_reports_first_error_per_field(self, controller):
        state = await controller.submit()

        assert isinstance(state, Idle)
        assert controller.field_errors["fullName"] == (
            "Name must be at least 2 characters"
        )
        assert controller.field_errors["email"] == "Please enter a valid email"
        assert controller.field_errors["acceptTerms"] == "You must accept the terms"
        assert "budgetUsd" not in controller.field_errors

    @pytest.mark.asyncio
    async def test_start_date_uses_fixed_today(self, onboard_url):
        today = timezone.localdate() + timedelta(days=30)
        controller = FormController(url=onboard_url, today=today)

        await controller.submit(OnboardingValuesFactory())

        assert controller.field_errors == {
            "projectStartDate": "Start date must be today or in the future"
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_errors_clear_after_correction(self, controller, onboard_url):
        respx.post(onboard_url).mock(side_effect=echo_response)
        await controller.submit(OnboardingValuesFactory(acceptTerms=False))
        assert "acceptTerms" in controller.field_errors

        state = await controller.submit({"acceptTerms": True})

        assert isinstance(state, Succeeded)
        assert controller.field_errors == {}


class TestSubmissionFailure:
    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_message_is_shown(self, controller, onboard_url):
        respx.post(onboard_url).mock(
            return_value=httpx.Response(500, json={"message": "server error"})
        )
        values = OnboardingValuesFactory()

        state = await controller.submit(values)

        assert isinstance(state, Failed)
        assert state.message == "server error"
        assert controller.error_message == "server error"
        assert controller.editable
        assert controller.values == values

    @pytest.mark.asyncio
    @respx.mock
    async def test_unparseable_error_body_uses_status_message(
        self, controller, onboard_url
    ):
        respx.post(onboard_url).mock(return_value=httpx.Response(503, text="down"))

        state = await controller.submit(OnboardingValuesFactory())

        assert isinstance(state, Failed)
        assert state.message == "HTTP error, status 503"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable_endpoint_shows_generic_message(
        self, controller, onboard_url
    ):
        respx.post(onboard_url).mock(side_effect=httpx.ConnectError("refused"))

        state = await controller.submit(OnboardingValuesFactory())

        assert isinstance(state, Failed)
        assert state.message == GENERIC_ERROR_MESSAGE
        assert controller.editable

    @pytest.mark.asyncio
    async def test_client_construction_error_fails_submission(self, onboard_url):
        controller = FormController(url=onboard_url)

        with patch(
            "apps.web.onboarding.controller.OnboardingClient",
            side_effect=RuntimeError("bad config"),
        ):
            state = await controller.submit(OnboardingValuesFactory())

        assert isinstance(state, Failed)
        assert state.message == GENERIC_ERROR_MESSAGE
        assert not controller.busy
        assert controller.editable

    @pytest.mark.asyncio
    @respx.mock
    async def test_can_resubmit_after_failure(self, controller, onboard_url):
        route = respx.post(onboard_url).mock(
            side_effect=[
                httpx.Response(500, json={"message": "server error"}),
                httpx.Response(200, json={"status": "success"}),
            ]
        )

        first = await controller.submit(OnboardingValuesFactory())
        second = await controller.submit()

        assert isinstance(first, Failed)
        assert isinstance(second, Succeeded)
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_validation_failure_keeps_failure_banner(
        self, controller, onboard_url
    ):
        respx.post(onboard_url).mock(
            return_value=httpx.Response(500, json={"message": "server error"})
        )
        await controller.submit(OnboardingValuesFactory())

        state = await controller.submit({"email": "nope"})

        assert isinstance(state, Failed)
        assert controller.field_errors == {"email": "Please enter a valid email"}


class TestConfirmationSummary:
    @pytest.mark.asyncio
    @respx.mock
    async def test_lists_submitted_values(self, controller, onboard_url):
        respx.post(onboard_url).mock(side_effect=echo_response)
        values = OnboardingValuesFactory(
            services=["UI/UX", "Web Dev"],
            budgetUsd=25000,
            projectStartDate="2099-03-05",
        )
        state = await controller.submit(values)

        assert confirmation_summary(state.data) == [
            ("Name", "Jane Smith"),
            ("Email", "jane@example.com"),
            ("Company", "Acme Corp"),
            ("Services", "UI/UX, Web Dev"),
            ("Budget", "$25,000"),
            ("Start Date", "March 5, 2099"),
        ]

    @pytest.mark.asyncio
    @respx.mock
    async def test_omits_budget_when_absent(self, controller, onboard_url):
        respx.post(onboard_url).mock(side_effect=echo_response)
        state = await controller.submit(OnboardingValuesFactory(budgetUsd=None))

        labels = [label for label, _ in confirmation_summary(state.data)]

        assert "Budget" not in labels
