"""
FastAPI main application for the Book Tracker API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.auth import (
    TokenManager, UserDirectory, get_current_user_id,
    get_token_manager, get_user_directory,
)
from api.config import config as api_config
from api.models import (
    BookListResponse, BookQueryParams, BookRequest, BookResponse, BookStatsResponse,
    ErrorResponse, HealthResponse, LoginRequest, LoginResponse, UserResponse,
)
from api.service import APIBookService
from library.errors import BookNotFound, BookStoreError, CapacityExceeded, ValidationRejected
from library.seed import seed_demo_books
from library.store import BookStore
from utilities.config import config

# Setup logging
logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    ValidationRejected: status.HTTP_400_BAD_REQUEST,
    CapacityExceeded: status.HTTP_409_CONFLICT,
    BookNotFound: status.HTTP_404_NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Book Tracker API")

    store = BookStore(max_books=config.max_books)
    if config.seed_demo_books:
        seed_demo_books(store, config.demo_owner_id, datetime.now(timezone.utc))

    app.state.store = store
    app.state.users = UserDirectory.with_demo_users(rounds=api_config.bcrypt_rounds)
    app.state.tokens = TokenManager()
    logger.info("Book store ready", max_books=store.max_books, total_books=store.count())

    yield

    # Shutdown
    logger.info("Shutting down Book Tracker API")


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description + """

    ## Features

    * **Books**: Add, edit, delete and browse your books
    * **Search**: Case-insensitive search over title, author and ISBN
    * **Sorting**: By title, author, rating or date added
    * **Pagination**: `page` and `pageSize` query parameters
    * **Statistics**: Rating distribution and note counts

    ## Authentication

    Log in at `/api/auth/login` and send the returned token in the Authorization header:

    ```
    Authorization: Bearer your_token_here
    ```
    """,
    version=api_config.api_version,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


def get_book_store(request: Request) -> BookStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Book store not available"
        )
    return store


def get_book_service(store: BookStore = Depends(get_book_store)) -> APIBookService:
    return APIBookService(store, max_page_size=api_config.max_page_size)


def error_response(
    status_code: int,
    error: str,
    code: Optional[str] = None,
    detail: Optional[str] = None,
    reasons: Optional[list] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            status_code=status_code,
            code=code,
            reasons=reasons,
        ).model_dump(),
        headers=headers
    )


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    code = "bad_request" if exc.status_code == status.HTTP_400_BAD_REQUEST else None
    return error_response(exc.status_code, str(exc.detail), code=code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    """Malformed bodies and query parameters are caller errors."""
    problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        code="bad_request",
        reasons=problems,
    )


@app.exception_handler(BookStoreError)
async def book_store_exception_handler(request, exc: BookStoreError):
    """Map typed store failures to status codes."""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    reasons = None
    if isinstance(exc, ValidationRejected):
        reasons = [reason.message for reason in exc.reasons]
    if status_code >= 500:
        logger.error("Book store fault", code=exc.code, error=exc.message, path=request.url.path)

    return error_response(status_code, exc.message, code=exc.code, reasons=reasons)


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        detail=str(exc) if api_config.debug else None,
    )


def json_content(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


# Health check endpoint (no authentication required)
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(store: BookStore = Depends(get_book_store)):
    """Health check endpoint."""
    health_info = APIBookService(store).health_check()
    return HealthResponse(
        status="healthy" if health_info["capacity_remaining"] > 0 else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        store_status=health_info["status"],
        total_books=health_info["total_books"]
    )


# Auth endpoints
@app.post("/api/auth/login", response_model=LoginResponse, tags=["Authentication"])
async def login(
    credentials: LoginRequest,
    users: UserDirectory = Depends(get_user_directory),
    tokens: TokenManager = Depends(get_token_manager)
):
    """Exchange a username and password for a bearer token."""
    user = users.authenticate(credentials.username, credentials.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    response = LoginResponse(
        token=tokens.create_token(user),
        user=UserResponse(**user.model_dump())
    )
    return JSONResponse(content=json_content(response))


@app.get("/api/auth/me", response_model=UserResponse, tags=["Authentication"])
async def current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserDirectory = Depends(get_user_directory)
):
    """Profile of the authenticated user."""
    user = users.get(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' not found"
        )
    return JSONResponse(content=json_content(UserResponse(**user.model_dump())))


# Books endpoints
@app.get("/api/books", response_model=BookListResponse, tags=["Books"])
async def get_books(
    page: int = 1,
    page_size: int = Query(api_config.default_page_size, alias="pageSize"),
    search: Optional[str] = None,
    sort_by: str = Query("title", alias="sortBy"),
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """
    Get your books with searching, sorting, and pagination.

    - **page**: Page number (starts from 1)
    - **pageSize**: Items per page
    - **search**: Case-insensitive match on title, author or ISBN
    - **sortBy**: title, author, rating (highest first) or createdAt (newest first)
    """
    try:
        query_params = BookQueryParams(
            page=page,
            page_size=page_size,
            search=search,
            sort_by=sort_by
        )
        result = service.get_books(user_id, query_params)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return JSONResponse(content=json_content(result))


@app.get("/api/books/stats", response_model=BookStatsResponse, tags=["Books"])
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """Get reading statistics for your books."""
    return JSONResponse(content=json_content(service.get_stats(user_id)))


@app.get("/api/books/{book_id}", response_model=BookResponse, tags=["Books"])
async def get_book(
    book_id: str,
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """
    Get a single book by ID.

    - **book_id**: Book identifier
    """
    book = service.get_book_by_id(user_id, book_id)
    if not book:
        raise BookNotFound(book_id)

    return JSONResponse(content=json_content(book))


@app.post("/api/books", response_model=BookResponse, status_code=status.HTTP_201_CREATED, tags=["Books"])
async def add_book(
    request: BookRequest,
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """Add a book to your collection."""
    book = service.add_book(user_id, request)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=json_content(book),
        headers={"Location": f"/api/books/{book.id}"}
    )


@app.put("/api/books/{book_id}", response_model=BookResponse, tags=["Books"])
async def update_book(
    book_id: str,
    request: BookRequest,
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """Replace the content of one of your books."""
    return JSONResponse(content=json_content(service.update_book(user_id, book_id, request)))


@app.delete("/api/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Books"])
async def delete_book(
    book_id: str,
    user_id: str = Depends(get_current_user_id),
    service: APIBookService = Depends(get_book_service)
):
    """Delete one of your books."""
    service.delete_book(user_id, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
