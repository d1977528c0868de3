"""Error kinds raised by the placeholder image core.

The set is deliberately closed so the HTTP layer can map every failure to a
status code:

- :class:`ValidationError` and its subclasses describe bad caller input.
  Messages are meant to be shown to the user as-is.
- :class:`GenerationError` and its subclasses describe server-side failures
  that occur after a request was accepted.
"""


class PlaceholderError(Exception):
    """Base class for every error raised by the core."""

    pass


class ValidationError(PlaceholderError):
    """User-friendly validation error.

    Raised before any font or cache resource is touched.
    """

    pass


class InvalidSize(ValidationError):
    """The size token is malformed or outside the accepted range."""


class UnsupportedFormat(ValidationError):
    """The requested image format is not one of the supported encodings."""


class InvalidColor(ValidationError):
    """A color token is not exactly six hexadecimal digits."""


class GenerationError(PlaceholderError):
    """An accepted request could not be turned into image bytes."""

    pass


class FontUnavailable(GenerationError):
    """The embedded font program (or a face built from it) is unusable.

    When raised for the font program itself the failure is permanent for
    the lifetime of the process.
    """


class EncodingError(GenerationError):
    """Serializing a rendered image failed."""
