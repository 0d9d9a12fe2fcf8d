"""
Mock onboarding submission endpoint.

Stands in for the real intake service during development: waits
ONBOARD_MOCK_DELAY_MS, then echoes the payload back. It performs no
validation and stores nothing.
"""

import json
import logging
import time

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def onboard(request: HttpRequest) -> JsonResponse:
    """
    POST /api/onboard

    Returns 200 with {status, message, data} echoing the JSON body,
    or 400 if the body is not JSON.
    """
    delay_ms = getattr(settings, "ONBOARD_MOCK_DELAY_MS", 0)
    if delay_ms > 0:
        time.sleep(delay_ms / 1000)

    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Mock onboard endpoint got invalid JSON: %s", e)
        return JsonResponse(
            {"status": "error", "message": "Invalid JSON payload"},
            status=400,
        )

    logger.info("Mock onboard endpoint received: %s", data)

    return JsonResponse(
        {
            "status": "success",
            "message": "Form submitted successfully (mock response)",
            "data": data,
        },
        status=200,
    )
