"""
Submit one onboarding form from the command line.

Usage:
    uv run python apps/web/manage.py submit_onboarding \\
        --full-name "Jane Smith" --email jane@example.com \\
        --company "Acme Corp" --service "UI/UX" --service Branding \\
        --budget 1000 --start-date 2030-01-15 --accept-terms
    uv run python apps/web/manage.py submit_onboarding ... \\
        --url http://localhost:8000/api/onboard
"""

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from asgiref.sync import async_to_sync

from apps.web.onboarding.controller import (
    Failed,
    FormController,
    Succeeded,
    confirmation_summary,
)


class Command(BaseCommand):
    help = "Validate and submit an onboarding form to the submission endpoint"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument("--full-name", default="", help="Contact's full name")
        parser.add_argument("--email", default="", help="Contact email address")
        parser.add_argument("--company", default="", help="Company name")
        parser.add_argument(
            "--service",
            action="append",
            default=[],
            dest="services",
            help="Requested service (repeatable): UI/UX, Branding, Web Dev, Mobile App",
        )
        parser.add_argument("--budget", default="", help="Budget in whole USD")
        parser.add_argument(
            "--start-date", default="", help="Project start date (YYYY-MM-DD)"
        )
        parser.add_argument(
            "--accept-terms",
            action="store_true",
            help="Accept the terms and conditions",
        )
        parser.add_argument(
            "--url",
            default=None,
            help="Submission endpoint (default: ONBOARD_URL setting)",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        controller = FormController(url=options["url"])
        values = {
            "fullName": options["full_name"],
            "email": options["email"],
            "companyName": options["company"],
            "services": options["services"],
            "budgetUsd": options["budget"],
            "projectStartDate": options["start_date"],
            "acceptTerms": options["accept_terms"],
        }

        state = async_to_sync(controller.submit)(values)

        if controller.field_errors:
            for field, message in controller.field_errors.items():
                self.stderr.write(f"  {field}: {message}")
            raise CommandError("Form has validation errors")

        if isinstance(state, Failed):
            raise CommandError(f"Submission failed: {state.message}")

        if isinstance(state, Succeeded):
            self.stdout.write(self.style.SUCCESS("Form submitted successfully!"))
            for label, value in confirmation_summary(state.data):
                self.stdout.write(f"  {label}: {value}")
            if state.response:
                self.stdout.write(json.dumps(state.response, indent=2))
