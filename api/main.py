"""
FastAPI main application for the Books JSON API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config
from api.errors import BookNotFoundError, StorageError
from api.models import (
    Book, BookPayload, ErrorResponse, HealthResponse, MessageResponse
)
from api.repository import BookRepository
from api.storage import JsonDocumentStore

# Setup logging
logger = structlog.get_logger(__name__)

# Global repository
repository: Optional[BookRepository] = None

WELCOME_MESSAGE = (
    "¡Hola! Bienvenido a mi servidor.\n"
    "Para ver los libros, accede a /books\n"
    "Para ver un libro en específico, accede a /books/{id}\n"
    "Para agregar un nuevo libro, realiza una petición POST a /books\n"
    "Para actualizar un libro, realiza una petición PUT a /books/{id}\n"
    "Para eliminar un libro, realiza una petición DELETE a /books/{id}"
)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Book not found"},
    500: {"model": ErrorResponse, "description": "Storage error"},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Books JSON API", data_file=config.data_file, port=config.port)

    global repository
    store = JsonDocumentStore(config.get_data_file_path())

    if not store.exists():
        if config.create_data_file:
            store.initialize()
        else:
            # Requests will answer 500 until the file is created
            logger.warning("Data file not found", data_file=config.data_file)

    repository = BookRepository(store, id_strategy=config.id_strategy)

    yield

    logger.info("Shutting down Books JSON API")
    repository = None


app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


def _error_content(error: str, detail: Any = None) -> Dict[str, Any]:
    return ErrorResponse(
        error=error,
        detail=detail if config.debug else None
    ).model_dump(exclude_none=True)


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    logger.warning("Invalid request", path=request.url.path, errors=str(exc.errors()))
    return JSONResponse(
        status_code=422,
        content=_error_content("Invalid request body", detail=str(exc.errors()))
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content("Internal server error", detail=str(exc))
    )


def get_repository() -> BookRepository:
    """Dependency returning the active repository."""
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Storage service not available"
        )
    return repository


@app.get("/", response_class=PlainTextResponse, tags=["Welcome"])
async def welcome():
    """Welcome message listing the available routes."""
    return WELCOME_MESSAGE


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    storage_status = "unavailable"
    books_count = None

    if repository is not None:
        try:
            books_count = await repository.count()
            storage_status = "healthy"
        except StorageError as e:
            logger.warning("Health check storage read failed", error=str(e))
            storage_status = "unhealthy"

    return HealthResponse(
        status="healthy" if storage_status == "healthy" else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        version=config.api_version,
        storage_status=storage_status,
        books_count=books_count
    )


# Books endpoints
@app.get("/books", response_model=List[Book], responses=ERROR_RESPONSES, tags=["Books"])
async def list_books(repo: BookRepository = Depends(get_repository)):
    """Get every book in the collection."""
    try:
        books = await repo.list_books()
        return JSONResponse(content=books)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@app.get("/books/{book_id}", response_model=Book, responses=ERROR_RESPONSES, tags=["Books"])
async def get_book(book_id: str, repo: BookRepository = Depends(get_repository)):
    """
    Get a single book by ID.
    
    - **book_id**: Integer book identifier
    """
    try:
        book = await repo.get_book(book_id)
        return JSONResponse(content=book)
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@app.post(
    "/books",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    tags=["Books"]
)
async def create_book(
    payload: Optional[BookPayload] = None,
    repo: BookRepository = Depends(get_repository)
):
    """
    Add a new book.
    
    Any JSON object is accepted; the new book gets the next id.
    """
    fields = payload.supplied_fields() if payload is not None else {}
    try:
        book = await repo.create_book(fields)
        return JSONResponse(content=book, status_code=status.HTTP_201_CREATED)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@app.put("/books/{book_id}", response_model=MessageResponse, responses=ERROR_RESPONSES, tags=["Books"])
async def update_book(
    book_id: str,
    payload: Optional[BookPayload] = None,
    repo: BookRepository = Depends(get_repository)
):
    """
    Update a book by ID.
    
    Supplied fields overwrite the stored ones; everything else is kept.
    """
    fields = payload.supplied_fields() if payload is not None else {}
    try:
        message = await repo.update_book(book_id, fields)
        return MessageResponse(message=message)
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@app.delete("/books/{book_id}", response_model=MessageResponse, responses=ERROR_RESPONSES, tags=["Books"])
async def delete_book(book_id: str, repo: BookRepository = Depends(get_repository)):
    """Delete a book by ID."""
    try:
        message = await repo.delete_book(book_id)
        return MessageResponse(message=message)
    except BookNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
