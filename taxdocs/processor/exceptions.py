class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class DocumentAccessDeniedError(ProcessorError):
    """Raised when the caller does not own the requested document."""


class MissingDocumentFileError(ProcessorError):
    """Raised when a document row has no stored file location."""


class DocumentBusyError(ProcessorError):
    """Raised when another run already holds the document in PROCESSING."""


class FileFetchError(ProcessorError):
    """Raised when a remote document location answers with a non-success status."""


class FileReadError(ProcessorError):
    """Raised when a file cannot be read from disk or the network."""


class DocumentPersistenceError(ProcessorError):
    """Raised when the final processing state cannot be written."""
