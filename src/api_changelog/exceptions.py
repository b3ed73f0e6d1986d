"""Exception hierarchy for api-changelog.

Every exception carries a class-level ``exit_code`` that the CLI uses when
the error reaches the top level::

    ChangelogError (exit 1)
    +-- UnsupportedFormatError (exit 2)
    +-- FormatMismatchError    (exit 2)
    +-- ParseError             (exit 3)
        +-- UnknownSpecShapeError (exit 3)

The comparator and risk scorer never raise; anything that goes wrong
happens while turning documents into ``ApiSpec`` values or pairing them up.
"""

EXIT_SUCCESS = 0
EXIT_GENERIC_FAILURE = 1
EXIT_UNSUPPORTED_FORMAT = 2
EXIT_PARSE_ERROR = 3
EXIT_BREAKING_CHANGES = 4


class ChangelogError(Exception):
    """Base exception for all api-changelog errors."""

    exit_code: int = EXIT_GENERIC_FAILURE


class UnsupportedFormatError(ChangelogError):
    """Raised when a filename's extension maps to no known spec format."""

    exit_code = EXIT_UNSUPPORTED_FORMAT

    def __init__(self, filename: str, extension: str):
        self.filename = filename
        self.extension = extension
        shown = f".{extension}" if extension else "(none)"
        super().__init__(f"Unsupported spec format for '{filename}': extension {shown}")


class FormatMismatchError(ChangelogError):
    """Raised when two files to be compared are in different spec formats."""

    exit_code = EXIT_UNSUPPORTED_FORMAT

    def __init__(self, old_file: str, old_type: str, new_file: str, new_type: str):
        self.old_file = old_file
        self.new_file = new_file
        super().__init__(f"Cannot compare '{old_file}' ({old_type}) with '{new_file}' ({new_type}): formats differ")


class ParseError(ChangelogError):
    """Raised when a document of a recognized format cannot be normalized.

    The message is always prefixed with the offending filename, and the
    original exception is kept in ``cause``.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(self, file: str, cause: Exception | str):
        self.file = file
        self.cause = cause
        super().__init__(f"Failed to parse spec file '{file}': {cause}")


class UnknownSpecShapeError(ParseError):
    """Raised when a YAML/JSON document is neither OpenAPI/Swagger nor AsyncAPI."""

    def __init__(self, file: str):
        super().__init__(file, "Unknown YAML/JSON spec format (no 'openapi', 'swagger' or 'asyncapi' key)")
