"""
URL configuration for Onboard.
"""

from django.urls import include, path

from apps.web.onboarding import api as onboarding_api

urlpatterns = [
    path("onboard/", include("apps.web.onboarding.urls")),
    # Mock submission endpoint
    path("api/onboard", onboarding_api.onboard, name="onboard-api"),
]
