"""
Onboarding form views - server-rendered form with HTMX partials.

Full page on initial load; HTMX requests get just the form or the
confirmation fragment.
"""

from typing import Any

from django.http import HttpRequest, HttpResponse
from django.shortcuts import render
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from asgiref.sync import async_to_sync
from onboard_schemas import Service

from apps.web.onboarding.controller import FormController, confirmation_summary


def _posted_values(request: HttpRequest) -> dict[str, Any]:
    """Field state from a form POST. Unchecked checkboxes are absent."""
    return {
        "fullName": request.POST.get("fullName", ""),
        "email": request.POST.get("email", ""),
        "companyName": request.POST.get("companyName", ""),
        "services": request.POST.getlist("services"),
        "budgetUsd": request.POST.get("budgetUsd", ""),
        "projectStartDate": request.POST.get("projectStartDate", ""),
        "acceptTerms": "acceptTerms" in request.POST,
    }


def _form_context(controller: FormController) -> dict[str, Any]:
    selected = set(controller.values["services"])
    return {
        "values": controller.values,
        "errors": controller.field_errors,
        "error_message": controller.error_message,
        "today": timezone.localdate(),
        "services": [
            {"value": s.value, "checked": s.value in selected} for s in Service
        ],
    }


@require_http_methods(["GET", "POST"])
def onboarding_form(request: HttpRequest) -> HttpResponse:
    """
    GET/POST /onboard/

    GET renders a blank form ("submit another response" links here).
    POST validates and forwards the submission to ONBOARD_URL, then shows
    the confirmation or the form again with errors and prior values.
    """
    is_htmx = bool(request.headers.get("HX-Request"))
    controller = FormController()

    if request.method == "POST":
        async_to_sync(controller.submit)(_posted_values(request))

    if controller.submitted is not None:
        context = {"rows": confirmation_summary(controller.submitted)}
        if is_htmx:
            return render(request, "onboarding/partials/success.html", context)
        return render(request, "onboarding/success.html", context)

    context = _form_context(controller)
    if is_htmx:
        return render(request, "onboarding/partials/form.html", context)
    return render(request, "onboarding/form.html", context)
