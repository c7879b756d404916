"""
JSON document storage for the books collection.
The whole document is read and written on every call; there is no partial I/O.
"""

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

import structlog

from api.errors import StorageReadError, StorageWriteError
from api.models import BookDocument

logger = structlog.get_logger(__name__)


class JsonDocumentStore:
    """
    Reads and writes the books document backing the API.

    File access runs in a worker thread so callers on the event loop are not
    blocked. Nothing here locks the file: concurrent writers race and the last
    one wins.
    """

    def __init__(self, path: Union[str, Path], indent: int = 2):
        """
        Initialize the store.
        
        Args:
            path: Location of the JSON document
            indent: Indentation used when writing the document
        """
        self.path = Path(path)
        self.indent = indent

    async def read(self) -> BookDocument:
        """
        Load and parse the whole document.
        
        Returns:
            The parsed document
            
        Raises:
            StorageReadError: file missing, unreadable, not JSON, or wrong shape
        """
        return await asyncio.to_thread(self._read)

    async def write(self, document: BookDocument) -> None:
        """
        Serialize the document and overwrite the backing file.
        
        Raises:
            StorageWriteError: the file could not be written
        """
        await asyncio.to_thread(self._write, document)

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self.path.is_file()

    def initialize(self, overwrite: bool = False) -> bool:
        """
        Create the backing file with an empty books collection.
        
        Args:
            overwrite: Replace an existing file
            
        Returns:
            True if the file was written, False if it already existed
        """
        if self.exists() and not overwrite:
            return False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create data directory", path=str(self.path.parent), error=str(e))
            raise StorageWriteError() from e

        self._write(BookDocument(books=[]))
        logger.info("Initialized data file", path=str(self.path))
        return True

    def _read(self) -> BookDocument:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f, parse_constant=_reject_constant)
            return BookDocument.model_validate(raw)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            # ValueError covers JSONDecodeError, pydantic's ValidationError and NaN/Infinity
            logger.error("Failed to read data file", path=str(self.path), error=str(e))
            raise StorageReadError() from e

    def _write(self, document: BookDocument) -> None:
        tmp_path = None
        try:
            payload = json.dumps(
                document.model_dump(), indent=self.indent, ensure_ascii=False, allow_nan=False
            )
            # Readers only ever see the old or the new document, never a partial one
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.path.parent,
                prefix=f".{self.path.name}.", suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            if self.path.exists():
                shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write data file", path=str(self.path), error=str(e))
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageWriteError() from e


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name} is not allowed in the data file")
