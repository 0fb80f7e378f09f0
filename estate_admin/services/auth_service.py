import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from ..api.client import ApiClient
from ..core.auth import decode_token_hint
from ..core.errors import ApiError, UnauthorizedError
from ..models.employee import ChangePasswordBody
from ..models.notice import Notice
from ..models.user import LoginBody, RegisterBody, SessionUser
from ..state.session import LoginFailure, LoginStart, LoginSuccess, Logout
from ..state.snapshot import SnapshotStore
from ..state.store import Store
from .common import error_text, is_error_body, response_message, validate_form

log = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
LOGIN_PATH = "/login"


class LoginResult(BaseModel):
    ok: bool
    token: Optional[str] = None
    user: Optional[SessionUser] = None
    redirect: Optional[str] = None
    error: Optional[str] = None


def login(client: ApiClient, store: Store, snapshots: SnapshotStore, username: str, password: str) -> LoginResult:
    body = validate_form(LoginBody, {"username": username, "password": password})
    store.dispatch(LoginStart())

    try:
        response = client.login(body)
    except UnauthorizedError as exc:
        store.dispatch(LoginFailure(message=exc.message))
        return LoginResult(ok=False, error=exc.message)
    except ApiError as exc:
        log.exception("Login request failed for %s", body.username)
        message = error_text(exc)
        store.dispatch(LoginFailure(message=message))
        return LoginResult(ok=False, error=message)

    token = response.get("accessToken") if isinstance(response, dict) else None
    user_data = None
    if isinstance(response, dict):
        # Older backends answer with ``user`` instead of ``employee``
        user_data = response.get("employee") or response.get("user")

    if token and isinstance(user_data, dict):
        try:
            user = SessionUser.model_validate(user_data)
        except ValidationError:
            log.warning("Login response carried an unusable user record")
        else:
            snapshots.save(user)
            store.dispatch(LoginSuccess(user=user))
            log.info("Logged in as %s", user.username)
            return LoginResult(ok=True, token=token, user=user, redirect=DASHBOARD_PATH)

    message = response_message(response, "Login failed")
    store.dispatch(LoginFailure(message=message))
    return LoginResult(ok=False, error=message)


def logout(store: Store, snapshots: SnapshotStore) -> None:
    """Forget the local session. The caller clears the token cookie."""
    snapshots.clear()
    store.dispatch(Logout())


def restore_session(store: Store, snapshots: SnapshotStore, token: Optional[str]) -> bool:
    """Rehydrate the session from a stored token without asking the backend.

    Prefers the stored user snapshot and falls back to the token payload.
    Returns ``False`` when the token is unusable and should be discarded.
    """
    if store.state.auth.isAuthenticated:
        return True
    if not token:
        return False

    user = snapshots.load() or decode_token_hint(token)
    if user is None:
        return False
    store.dispatch(LoginSuccess(user=user))
    return True


def refresh_profile(client: ApiClient, store: Store, snapshots: SnapshotStore) -> SessionUser:
    """Replace the locally trusted user with the backend's view of it."""
    try:
        response = client.get_profile()
    except ApiError:
        log.exception("Failed to fetch the user profile")
        return store.state.auth.user

    if isinstance(response, dict) and response.get("id") is not None and not is_error_body(response):
        try:
            user = SessionUser.model_validate(response)
        except ValidationError:
            log.warning("Profile response does not describe a user")
            return store.state.auth.user
        snapshots.save(user)
        store.dispatch(LoginSuccess(user=user))
        return user
    return store.state.auth.user


def register(client: ApiClient, data: dict) -> Notice:
    body = validate_form(RegisterBody, data)
    try:
        response = client.register(body)
    except ApiError as exc:
        log.exception("Registration failed for %s", body.username)
        return Notice.error(error_text(exc))

    if is_error_body(response):
        return Notice.error(response_message(response, "Registration failed"))
    return Notice.success("Account registered successfully")


def change_password(client: ApiClient, old_password: str, new_password: str) -> Notice:
    body = validate_form(ChangePasswordBody, {"oldPassword": old_password, "newPassword": new_password})
    try:
        response = client.change_password(body)
    except ApiError as exc:
        log.exception("Password change failed")
        return Notice.error(error_text(exc))

    if is_error_body(response):
        return Notice.error(response_message(response, "Failed to change password"))
    return Notice.success(response_message(response, "Password changed successfully"))
