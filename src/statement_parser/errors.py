"""Error types raised by the statement pipeline."""


class StatementError(ValueError):
    """Base class for statement pipeline errors.

    Subclasses keep ValueError compatibility so callers that only know
    about ValueError still catch them.
    """


class MalformedAmount(StatementError):
    """A substring could not be read as a monetary amount."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Could not parse amount '{raw}'")
        self.raw = raw


class UnparseableDate(StatementError):
    """A substring did not match any supported date shape."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Could not parse date '{raw}'")
        self.raw = raw


class AIParseFailure(StatementError):
    """The AI backend returned nothing usable for a statement."""


class CategorizationFailure(StatementError):
    """The AI backend could not categorize a transaction."""


class UnsupportedFile(StatementError):
    """Uploaded file is neither a PDF nor an image."""


class TextExtractionError(StatementError):
    """No text could be recovered from an uploaded file."""


class OCRError(TextExtractionError):
    """The OCR backend failed or returned no text."""


class AnalysisFailure(StatementError):
    """The AI backend could not produce a spending report."""
