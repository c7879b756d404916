"""
Exception taxonomy for the books API.
"""


class BooksAPIError(Exception):
    """Base class for all books API errors."""


class StorageError(BooksAPIError):
    """Raised when the backing JSON document cannot be accessed."""


class StorageReadError(StorageError):
    """The document is missing, unreadable, or malformed."""

    def __init__(self, message: str = "No se pudo leer el archivo"):
        super().__init__(message)


class StorageWriteError(StorageError):
    """The document could not be written back to disk."""

    def __init__(self, message: str = "No se pudo escribir en el archivo"):
        super().__init__(message)


class BookNotFoundError(BooksAPIError):
    """No book matches the requested id."""

    def __init__(self, book_id=None, message: str = "Libro no encontrado"):
        self.book_id = book_id
        super().__init__(message)
