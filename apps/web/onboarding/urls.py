"""
Onboarding URL routes.
"""

from django.urls import path

from . import views

app_name = "onboarding"

urlpatterns = [
    path("", views.onboarding_form, name="form"),
]
