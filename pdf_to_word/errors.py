"""Exception hierarchy for the PDF to Word conversion pipeline."""


class ToolboxError(Exception):
    """Base class for all conversion errors."""


class UnsupportedInputError(ToolboxError):
    """The declared media type is not one the pipeline converts.

    Raised before any extraction is attempted.
    """


class CorruptInputError(ToolboxError):
    """The uploaded bytes cannot be opened as a PDF container at all.

    A valid PDF that simply has no text layer is *not* an error; that case
    is reported through ``ExtractionResult.succeeded``.
    """


class EmissionError(ToolboxError):
    """An emitter produced an empty document.

    This signals a bug rather than bad input.
    """
