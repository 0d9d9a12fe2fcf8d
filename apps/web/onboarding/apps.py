"""Django app configuration for the onboarding form."""

from django.apps import AppConfig


class OnboardingConfig(AppConfig):
    """Onboarding app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.onboarding"
    verbose_name = "Client Onboarding"
