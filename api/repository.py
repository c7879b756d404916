"""
Repository operations for the books collection.
Every operation loads the entire document; mutations persist the entire document.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional, Union

import structlog

from api.errors import BookNotFoundError
from api.models import BookDocument
from api.storage import JsonDocumentStore

logger = structlog.get_logger(__name__)

UPDATED_MESSAGE = "Libro actualizado"
DELETED_MESSAGE = "Libro eliminado"

ID_STRATEGIES = ("length", "max")

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_book_id(raw: Union[str, int, None]) -> Optional[int]:
    """
    Parse a book id from a path segment.

    Leading base-10 digits are used and trailing characters ignored, so
    "7abc" is 7. Returns None when the segment has no leading digits; None
    never matches a stored id.
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Longer than the interpreter allows for int(); no stored id can match
        return None


def _id_matches(book: Dict[str, Any], book_id: Optional[int]) -> bool:
    if book_id is None:
        return False
    value = book.get("id")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value == book_id


class BookRepository:
    """Book repository operations on top of a JSON document store."""

    def __init__(self, store: JsonDocumentStore, id_strategy: str = "length"):
        """
        Initialize the repository.
        
        Args:
            store: Storage accessor for the backing document
            id_strategy: "length" assigns len(books) + 1, "max" assigns the highest integer id + 1
        """
        if id_strategy not in ID_STRATEGIES:
            raise ValueError(f"id_strategy must be one of: {list(ID_STRATEGIES)}")
        self.store = store
        self.id_strategy = id_strategy
        # Serializes read-modify-write cycles within this process
        self._write_lock = asyncio.Lock()

    def next_id(self, books: List[Dict[str, Any]]) -> int:
        """Compute the id for a new book under the configured strategy."""
        if self.id_strategy == "max":
            ids = [
                int(book["id"]) for book in books
                if isinstance(book.get("id"), (int, float)) and not isinstance(book.get("id"), bool)
            ]
            return max(ids, default=0) + 1
        return len(books) + 1

    async def list_books(self) -> List[Dict[str, Any]]:
        """Return every stored book in document order."""
        document = await self.store.read()
        return document.books

    async def count(self) -> int:
        """Return the number of stored books."""
        document = await self.store.read()
        return len(document.books)

    async def get_book(self, raw_id: Union[str, int]) -> Dict[str, Any]:
        """
        Get the first book whose id equals the parsed id.
        
        Raises:
            BookNotFoundError: no book has that id
        """
        document = await self.store.read()
        book_id = parse_book_id(raw_id)

        for book in document.books:
            if _id_matches(book, book_id):
                return book

        raise BookNotFoundError(raw_id)

    async def create_book(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Append a new book built from the supplied fields.

        The id is assigned first and the supplied fields are merged after it,
        so a supplied "id" takes precedence.
        
        Returns:
            The created book
        """
        async with self._write_lock:
            document = await self.store.read()
            book = {"id": self.next_id(document.books), **fields}
            document.books.append(book)
            await self.store.write(document)

        logger.info("Book created", book_id=book.get("id"), total=len(document.books))
        return book

    async def update_book(self, raw_id: Union[str, int], fields: Dict[str, Any]) -> str:
        """
        Shallow-merge the supplied fields onto an existing book.

        The id field is not protected and may be overwritten.
        
        Returns:
            Confirmation message
            
        Raises:
            BookNotFoundError: no book has that id
        """
        async with self._write_lock:
            document = await self.store.read()
            book_id = parse_book_id(raw_id)
            index = next(
                (i for i, book in enumerate(document.books) if _id_matches(book, book_id)),
                None
            )
            if index is None:
                raise BookNotFoundError(raw_id)

            document.books[index] = {**document.books[index], **fields}
            await self.store.write(document)

        logger.info("Book updated", book_id=book_id, fields=sorted(fields))
        return UPDATED_MESSAGE

    async def delete_book(self, raw_id: Union[str, int]) -> str:
        """
        Remove every book whose id equals the parsed id.
        
        Returns:
            Confirmation message
            
        Raises:
            BookNotFoundError: nothing was removed; the document is left untouched
        """
        async with self._write_lock:
            document = await self.store.read()
            book_id = parse_book_id(raw_id)
            remaining = [book for book in document.books if not _id_matches(book, book_id)]

            if len(remaining) == len(document.books):
                raise BookNotFoundError(raw_id)

            removed = len(document.books) - len(remaining)
            document.books = remaining
            await self.store.write(document)

        logger.info("Book deleted", book_id=book_id, removed=removed)
        return DELETED_MESSAGE


def duplicate_ids(document: BookDocument) -> List[Any]:
    """Return ids that appear on more than one book."""
    seen = set()
    duplicates = []
    for book in document.books:
        value = book.get("id")
        if isinstance(value, bool):
            continue
        try:
            if value in seen and value not in duplicates:
                duplicates.append(value)
            seen.add(value)
        except TypeError:
            continue
    return duplicates
