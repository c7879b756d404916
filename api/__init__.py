"""
FastAPI REST API over a books collection stored in a JSON file.

This package provides:
- Whole-document JSON storage
- Book repository operations (list, get, create, update, delete)
- HTTP routes mapping those operations to JSON responses
"""
