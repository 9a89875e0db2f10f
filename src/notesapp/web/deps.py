from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie

from notesapp.app import App

AUTH_COOKIE = "authorization"

# Security scheme
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_current_user_id(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> int:
    """Authentication guard: validate the session cookie and expose the user id.

    Raises AuthenticationError before the handler runs when the token is missing or invalid.
    """
    user_id = app.authenticate(token_cookie)
    request.state.user_id = user_id
    return user_id


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
UserIdDep = Annotated[int, Depends(get_current_user_id)]
