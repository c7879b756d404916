#!/usr/bin/env python3
"""
Data File Management Utility

This script provides utilities to manage the books data file:
- Create an empty data file
- List all books
- Show collection statistics
- Check that the file can be read
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from api.config import config
from api.errors import StorageError
from api.repository import BookRepository, duplicate_ids
from api.storage import JsonDocumentStore
from utilities.logger import setup_logging

USAGE = """Usage: python manage_data.py [init|list|stats|check] [--force]

Commands:
  init     - Create the data file with an empty books collection
  list     - List all books
  stats    - Show collection statistics
  check    - Verify the data file can be read

Examples:
  python manage_data.py init
  python manage_data.py init --force
  python manage_data.py stats"""


def init_data_file(store: JsonDocumentStore, force: bool = False) -> int:
    """Create the data file."""
    try:
        if store.initialize(overwrite=force):
            print(f"✅ Created {store.path} with an empty books collection")
            return 0
    except StorageError as e:
        print(f"❌ Error creating data file: {e}")
        return 1

    print(f"❌ {store.path} already exists (use --force to overwrite)")
    return 1


async def list_books(store: JsonDocumentStore) -> int:
    """List all books in the data file."""
    print("\n" + "="*80)
    print("📚 ALL BOOKS")
    print("="*80)

    try:
        document = await store.read()
    except StorageError as e:
        print(f"❌ Error listing books: {e}")
        return 1

    if not document.books:
        print("❌ No books found in data file")
        return 0

    print(f"✅ Found {len(document.books)} books:")
    print()

    for i, book in enumerate(document.books, 1):
        print(f"{i:3d}. ID: {book.get('id')}")
        for key, value in book.items():
            if key != "id":
                print(f"     {key}: {value}")
        print()

    return 0


async def show_statistics(store: JsonDocumentStore) -> int:
    """Show statistics about the books collection."""
    print("\n📊 DATA FILE STATISTICS")
    print("="*80)

    try:
        document = await store.read()
    except StorageError as e:
        print(f"❌ Error getting statistics: {e}")
        return 1

    by_length = BookRepository(store, id_strategy="length").next_id(document.books)
    by_max = BookRepository(store, id_strategy="max").next_id(document.books)
    duplicates = duplicate_ids(document)

    print(f"File:                  {store.path}")
    print(f"Books:                 {len(document.books)}")
    print(f"Next id (length):      {by_length}")
    print(f"Next id (max):         {by_max}")

    if duplicates:
        print(f"⚠️  Duplicate ids:      {', '.join(str(d) for d in duplicates)}")
    if by_length != by_max:
        print("⚠️  The 'length' strategy would reuse an existing id after deletions.")
        print("   Set ID_STRATEGY=max to avoid duplicates.")

    return 0


async def check_data_file(store: JsonDocumentStore) -> int:
    """Verify the data file can be read and parsed."""
    try:
        document = await store.read()
    except StorageError as e:
        print(f"❌ {store.path}: {e}")
        return 1

    print(f"✅ {store.path}: {len(document.books)} books")
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        return 1

    command = args[0].lower()

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    store = JsonDocumentStore(config.get_data_file_path())

    if command == "init":
        return init_data_file(store, force="--force" in args[1:])
    elif command == "list":
        return await list_books(store)
    elif command == "stats":
        return await show_statistics(store)
    elif command == "check":
        return await check_data_file(store)

    print(f"❌ Unknown command: {command}")
    print("Available commands: init, list, stats, check")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
