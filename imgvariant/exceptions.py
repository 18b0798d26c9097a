class TransformerError(Exception):
    """Base class for errors raised by transformers."""


class UnsupportedFormatError(TransformerError, ValueError):
    """The backend cannot encode the requested target format."""

    def __init__(self, format: str):
        self.format = format
        super().__init__(f"Format not supported: {format!r}")


class UnsupportedImageProcessingMethod(TransformerError):
    """A transformation names an operation the backend does not allow."""


class UnsupportedImageProcessingArgument(TransformerError):
    """A transformation carries an argument that is not plain data."""


class NoTransformerError(TransformerError, LookupError):
    """No registered transformer accepts the given blob."""
