"""
Pytest configuration and shared fixtures.
"""

import json

import pytest

from api.repository import BookRepository
from api.storage import JsonDocumentStore


def write_document(path, document):
    """Write a raw document to disk for a test."""
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")


@pytest.fixture
def sample_books():
    """Sample books for testing."""
    return [
        {"id": 1, "title": "Cien años de soledad", "author": "Gabriel García Márquez", "year": 1967},
        {"id": 2, "title": "Rayuela", "author": "Julio Cortázar", "year": 1963},
        {"id": 3, "title": "Pedro Páramo", "author": "Juan Rulfo", "year": 1955},
    ]


@pytest.fixture
def empty_data_file(tmp_path):
    """Data file holding an empty books collection."""
    path = tmp_path / "data.json"
    write_document(path, {"books": []})
    return path


@pytest.fixture
def data_file(tmp_path, sample_books):
    """Data file holding the sample books."""
    path = tmp_path / "data.json"
    write_document(path, {"books": sample_books})
    return path


@pytest.fixture
def store(data_file):
    """Store over the sample data file."""
    return JsonDocumentStore(data_file)


@pytest.fixture
def repository(store):
    """Repository over the sample data file."""
    return BookRepository(store)
