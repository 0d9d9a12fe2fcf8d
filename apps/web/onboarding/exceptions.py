"""Onboarding submission exceptions."""


class OnboardingError(Exception):
    """Base exception for onboarding errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SubmissionError(OnboardingError):
    """The outbound submission did not complete successfully."""


class SubmissionRejectedError(SubmissionError):
    """The submission endpoint answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class SubmissionTransportError(SubmissionError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""


class FormLockedError(OnboardingError):
    """Field edits or a submit were attempted while the form is not editable."""
