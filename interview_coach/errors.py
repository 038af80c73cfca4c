"""Exceptions raised while handling an analysis request."""


class InterviewCoachError(Exception):
    """Base exception for the service."""

    pass


class ConfigurationError(InterviewCoachError):
    """Required configuration is missing or malformed."""

    pass


class InvalidRequestError(InterviewCoachError):
    """The client request cannot be processed (e.g. no video field)."""

    pass


class AnalysisError(InterviewCoachError):
    """Any failure after the upload was accepted.

    These all surface to the caller as the same generic 500 response.
    """

    pass


class RemoteTransportError(AnalysisError):
    """The remote service was unreachable or rejected the call."""

    pass


class RemoteProcessingError(AnalysisError):
    """The remote file ended in a state other than ACTIVE."""

    pass


class RemoteTimeoutError(AnalysisError):
    """The remote file was still processing after the last poll attempt."""

    pass


class UpstreamError(AnalysisError):
    """The generation request failed or returned nothing."""

    pass


class ResponseFormatError(AnalysisError):
    """No fenced JSON payload was found in the model output."""

    pass


class ResponseParseError(AnalysisError):
    """The fenced payload is not valid JSON or does not match the schema."""

    pass
