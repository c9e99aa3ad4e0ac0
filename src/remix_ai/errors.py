"""
Error types raised by the generation pipeline.

- ConfigurationError: missing credential, fatal at startup
- GenerationFailure: the remote call failed, recoverable by the user
- NoImageReturned: the remote call succeeded without producing an image
"""

UNKNOWN_REMOTE_ERROR = "An unknown error occurred while communicating with the AI."
NO_IMAGE_MESSAGE = (
    "The AI did not return an image. Please try a different prompt or images."
)


class RemixError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RemixError):
    pass


class GenerationFailure(RemixError):

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoImageReturned(GenerationFailure):

    def __init__(self, message: str = NO_IMAGE_MESSAGE):
        super().__init__(message)
