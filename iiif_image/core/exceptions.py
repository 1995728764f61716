"""Pipeline error taxonomy."""


class PipelineError(Exception):
    """Base class for every error raised while parsing or processing a request."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        """
        Initialize the error.

        Args:
            message (str): Human readable error description.
        """
        super().__init__(message)
        self.message = message


class RequestError(PipelineError):
    """The request text itself is not acceptable."""

    status_code = 400


class MalformedRequest(RequestError):
    """Wrong segment count, empty segment, bad percent-encoding or bad characters."""


class InvalidRegion(RequestError):
    """Region cannot be parsed or resolves to an empty rectangle."""


class InvalidSize(RequestError):
    """Size cannot be parsed or resolves to unusable dimensions."""


class UpscaleNotAllowed(InvalidSize):
    """Size would enlarge the region without the ``^`` prefix."""


class InvalidRotation(RequestError):
    """Rotation cannot be parsed."""


class UnsupportedQuality(RequestError):
    """Quality is outside the supported set."""


class UnsupportedFormat(RequestError):
    """Format is outside the supported set."""


class SourceError(PipelineError):
    """The source image could not be retrieved."""


class SourceNotFound(SourceError):
    """No source image exists for the identifier."""

    status_code = 404


class SourceUnreadable(SourceError):
    """The storage backend failed while reading the source."""

    status_code = 500


class ProcessingError(PipelineError):
    """Pixel processing failed."""


class DecodeError(ProcessingError):
    """The source bytes are not a decodable image."""

    status_code = 422


class EncodeError(ProcessingError):
    """The output image could not be encoded."""


class FormatCapabilityError(ProcessingError):
    """The output format is disabled or has no encoder available."""

    status_code = 501
