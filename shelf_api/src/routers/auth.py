"""
Authentication router.

Provides REST API endpoints for:
- User registration
- User login

There are no tokens: a successful call returns the user, and the client
carries its ID on later requests.
"""

import structlog
from fastapi import APIRouter, Depends, status

from shelf_api.src.dependencies import get_auth_service
from shelf_api.src.errors import Failure, error_response
from shelf_api.src.models.auth import LoginRequest, RegisterRequest, UserEnvelope
from shelf_api.src.models.common import ErrorResponse
from shelf_api.src.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

auth_router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Upstream Error"}
    }
)


@auth_router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"}
    }
)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Create an account.

    **Request Body:**
    - name, email, password (at least 6 characters)

    **Error Responses:**
    - 400: Missing field or short password
    - 409: Email already in use
    - 500: Record store failure
    """
    logger.info("registration_attempt", email=payload.email)

    result = await auth_service.register(payload.name, payload.email, payload.password)
    if isinstance(result, Failure):
        return error_response(result.error)

    return UserEnvelope(user=result.value)


@auth_router.post(
    "/login",
    response_model=UserEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Login",
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"}
    }
)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Check email and password.

    Unknown email and wrong password answer the same 401 body.
    """
    logger.info("login_attempt", email=payload.email)

    result = await auth_service.login(payload.email, payload.password)
    if isinstance(result, Failure):
        return error_response(result.error)

    return UserEnvelope(user=result.value)
