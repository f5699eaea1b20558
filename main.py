"""
FastAPI Application for the Rental Returns service.

Exposes the rental return endpoint plus staff login, and maps return
workflow failures to HTTP status codes.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from config import settings

# Import authentication module
from auth import (
    LoginRequest,
    LoginResponse,
    verify_password,
    create_session,
    delete_session,
    extract_token,
    get_principal,
)

from use_cases.rentals import ReturnProcessor
from use_cases.rentals.data import (
    InMemoryInventoryStore,
    InMemoryRentalStore,
    InMemoryUserDirectory,
    InventoryStore,
    RentalStore,
    UserDirectory,
    get_rental_client,
)
from use_cases.rentals.domain import (
    AlreadyProcessedError,
    InvalidInputError,
    RentalNotFoundError,
    ReturnRequestValidator,
    ReturnWorkflowError,
    StoreUnavailableError,
    UnauthenticatedError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Reduce Azure SDK logging verbosity
logging.getLogger("azure.cosmos").setLevel(logging.WARNING)
logging.getLogger("azure.core").setLevel(logging.WARNING)
logging.getLogger("azure.identity").setLevel(logging.WARNING)

# Global instances
rental_store: Optional[RentalStore] = None
inventory_store: Optional[InventoryStore] = None
user_directory: Optional[UserDirectory] = None
processor: Optional[ReturnProcessor] = None

ERROR_STATUS_CODES = {
    UnauthenticatedError: 401,
    InvalidInputError: 400,
    RentalNotFoundError: 404,
    AlreadyProcessedError: 400,
    StoreUnavailableError: 503,
}


def build_stores(backend: str) -> Tuple[RentalStore, InventoryStore, UserDirectory]:
    """Create the stores for the configured backend."""
    if backend == "memory":
        if settings.seed_sample_data:
            from data.sample.rental_data import MOVIES, USERS, prepare_rentals
            logger.info("Seeding in-memory stores with sample data")
            return (
                InMemoryRentalStore(prepare_rentals()),
                InMemoryInventoryStore(MOVIES),
                InMemoryUserDirectory(USERS),
            )
        return InMemoryRentalStore(), InMemoryInventoryStore(), InMemoryUserDirectory()

    if backend == "cosmos":
        client = get_rental_client()
        return client.rental_store(), client.inventory_store(), client.user_directory()

    raise ValueError(f"Unknown store backend: {backend}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    global rental_store, inventory_store, user_directory, processor

    logger.info("Starting Rental Returns Application...")

    rental_store, inventory_store, user_directory = build_stores(settings.store_backend)
    processor = ReturnProcessor(
        rental_store,
        inventory_store,
        validator=ReturnRequestValidator(settings.identifier_pattern),
    )
    logger.info(f"Return processor ready ({settings.store_backend} backend)")

    yield

    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Rental Returns",
    description="Closes movie rentals, computes rental fees and credits stock",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(error: ReturnWorkflowError) -> JSONResponse:
    """Map a return workflow failure to its HTTP response."""
    content: Dict[str, Any] = {"error": error.kind, "message": error.message}
    if isinstance(error, InvalidInputError):
        content["field"] = error.field
        content["errors"] = [
            {"field": e.field, "message": e.message, "code": e.code} for e in error.errors
        ]
    if isinstance(error, StoreUnavailableError):
        content["partially_committed"] = error.partially_committed
    status_code = ERROR_STATUS_CODES.get(type(error), 500)
    return JSONResponse(content=content, status_code=status_code)


# =============================================================================
# RETURNS
# =============================================================================

@app.post("/api/returns")
async def process_return(request: Request):
    """
    Close out the open rental for a customer and movie.

    Body: {"customerId": "...", "movieId": "..."}
    """
    if processor is None:
        return JSONResponse(content={"error": "Server not initialized"}, status_code=500)

    principal = get_principal(extract_token(request.headers, request.cookies))

    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        rental = await run_in_threadpool(
            processor.process_return,
            principal,
            payload.get("customerId"),
            payload.get("movieId"),
        )
    except ReturnWorkflowError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error processing return: {e}", exc_info=True)
        return JSONResponse(content={"error": "internal", "message": "Something failed."}, status_code=500)

    return rental.to_dict()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "use_case": "rental_returns",
        "store_backend": settings.store_backend,
    }


# =============================================================================
# AUTHENTICATION ENDPOINTS
# =============================================================================

@app.post("/api/auth/login")
async def login(request: LoginRequest):
    """
    Authenticate a staff user with email and password.
    Returns a session token on success.
    """
    if user_directory is None:
        return LoginResponse(success=False, message="Server not initialized")

    try:
        user = await run_in_threadpool(user_directory.get_user_by_email, request.email)
    except StoreUnavailableError as e:
        logger.error(f"Login lookup failed: {e.message}")
        return LoginResponse(
            success=False,
            message="An error occurred during login",
        )

    if not user or not verify_password(request.password, user.get("password_hash", "")):
        return LoginResponse(
            success=False,
            message="Invalid email or password",
        )

    token = create_session(user)

    # Return user info (excluding sensitive data)
    user_info = {
        "id": user["id"],
        "email": user["email"],
        "name": user.get("name", ""),
        "isAdmin": bool(user.get("isAdmin", False)),
    }

    logger.info(f"User logged in: {user['email']}")

    return LoginResponse(
        success=True,
        message="Login successful",
        token=token,
        user=user_info,
    )


@app.post("/api/auth/logout")
async def logout(request: Request):
    """
    Log out the current user by invalidating their session.
    """
    token = extract_token(request.headers, request.cookies)

    if delete_session(token):
        return {"success": True, "message": "Logged out successfully"}

    return {"success": True, "message": "No active session"}


@app.get("/api/auth/me")
async def get_current_user(request: Request):
    """
    Get the current logged-in user's info.
    """
    session = get_principal(extract_token(request.headers, request.cookies))
    if not session:
        return {"authenticated": False, "user": None}

    return {
        "authenticated": True,
        "user": {
            "id": session["user_id"],
            "email": session["email"],
            "name": session["name"],
            "isAdmin": session["is_admin"],
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower()
    )
