"""Auth Routes — session lifecycle, registration, and the local theme preference.

Invariants:
    - Failed login → 401 with the session's auth_error message; the cached session is untouched
    - Registration conflicts (existing username, second admin) → 409 from the service errors
"""

from fastapi import APIRouter, Depends, status

from origen.api.dependencies import get_auth, get_theme
from origen.core.errors import AuthenticationError, ErrorContext
from origen.schemas.entities import User
from origen.schemas.requests import LoginRequest, RegisterRequest, ThemeUpdate
from origen.services.auth_session import AuthSession, ThemePreference

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=User)
async def login(body: LoginRequest, auth: AuthSession = Depends(get_auth)):
    if not await auth.login(body.username, body.password):
        raise AuthenticationError(
            auth.auth_error or "Invalid username or password",
            ErrorContext(username=body.username, operation="login"),
        )
    return auth.current_user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: AuthSession = Depends(get_auth)):
    auth.logout()


@router.get("/me", response_model=User)
async def current_user(auth: AuthSession = Depends(get_auth)):
    if auth.current_user is None:
        raise AuthenticationError("No active session")
    return auth.current_user


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, auth: AuthSession = Depends(get_auth)):
    return await auth.register_user(
        body.username, body.password, role=body.role, full_name=body.full_name,
    )


@router.get("/users/{username}/exists")
async def user_exists(username: str, auth: AuthSession = Depends(get_auth)):
    return {"username": username, "exists": await auth.check_user_exists(username)}


@router.get("/theme")
async def get_theme_preference(theme: ThemePreference = Depends(get_theme)):
    return {"theme": theme.theme.value}


@router.put("/theme")
async def set_theme_preference(
    body: ThemeUpdate, theme: ThemePreference = Depends(get_theme),
):
    return {"theme": theme.set(body.theme).value}


@router.post("/theme/toggle")
async def toggle_theme_preference(theme: ThemePreference = Depends(get_theme)):
    return {"theme": theme.toggle().value}
