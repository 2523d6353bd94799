'''
API endpoints for Authentication including login and signup.
'''
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm

from ..services.auth_service import LoginService
from ..models import token as token_models
from ..models import user as user_models
from ..common.logger import log

class AuthRoutes:
    """
    A class to encapsulate all authentication endpoints.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/auth",
            tags=["Authentication"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/login",
            self.login_for_access_token,
            methods=["POST"],
            response_model=token_models.Token,
            summary="Login for Access Token"
        )
        self.router.add_api_route(
            "/signup",
            self.signup,
            methods=["POST"],
            response_model=user_models.UserRead,
            status_code=status.HTTP_201_CREATED,
            summary="Signup"
        )

    async def login_for_access_token(
        self,
        form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
        login_service: Annotated[LoginService, Depends(LoginService)]
    ):
        """
        Authenticates a user and returns an access token.
        Uses OAuth2PasswordRequestForm (username & password fields).
        """
        try:
            return await login_service.login_user(form_data)
        except HTTPException as e:
            raise e
        except Exception as e:
            log.error(f"Unexpected error during login: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal server error occurred during login.",
            )

    async def signup(
        self,
        user_data: user_models.UserCreate,
        request: Request,
        login_service: Annotated[LoginService, Depends(LoginService)]
    ):
        """
        Creates a new account.
        If no time zone is given it is determined from the request IP.
        """
        client_ip = request.client.host if request.client else None
        return await login_service.signup_user(user_data, ip_address=client_ip)

# Create an instance of the class and export its router
auth_routes = AuthRoutes()
router = auth_routes.router
