class GenerationError(Exception):
    """Base error for failures surfaced by the generation pipelines."""

    code: str = "GENERATION_ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class DecodeError(GenerationError, ValueError):
    """Malformed base64, data URI or WAV input."""

    code = "DECODE_ERROR"


class TransientQuotaError(GenerationError):
    """Rate limit or resource exhaustion reported by the remote service."""

    code = "TRANSIENT_QUOTA"


class ResponseSafetyBlocked(GenerationError):
    code = "RESPONSE_SAFETY_BLOCKED"


class EmptyResponse(GenerationError):
    code = "EMPTY_RESPONSE"


class ImageSafetyBlocked(GenerationError):
    code = "IMAGE_SAFETY_BLOCKED"


class ImageNotFound(GenerationError):
    code = "IMAGE_NOT_FOUND"


class ReferenceResolutionFailure(GenerationError):
    """The identity reference image could not be fetched or read."""

    code = "REFERENCE_RESOLUTION_FAILURE"

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Could not resolve reference {reference[:80]}: {reason}")
