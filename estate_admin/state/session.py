from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..models.user import ANONYMOUS_USER, SessionUser


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: SessionUser = ANONYMOUS_USER
    isAuthenticated: bool = False
    isLoading: bool = False
    error: Optional[str] = None


class LoginStart(BaseModel):
    type: Literal["auth/loginStart"] = "auth/loginStart"


class LoginSuccess(BaseModel):
    type: Literal["auth/loginSuccess"] = "auth/loginSuccess"
    user: SessionUser


class LoginFailure(BaseModel):
    type: Literal["auth/loginFailure"] = "auth/loginFailure"
    message: str


class Logout(BaseModel):
    type: Literal["auth/logout"] = "auth/logout"


class ClearError(BaseModel):
    type: Literal["auth/clearError"] = "auth/clearError"


SessionAction = Union[LoginStart, LoginSuccess, LoginFailure, Logout, ClearError]


def reduce_session(state: SessionState, action) -> SessionState:
    if isinstance(action, LoginStart):
        return state.model_copy(update={"isLoading": True})
    if isinstance(action, LoginSuccess):
        return state.model_copy(
            update={"isLoading": False, "isAuthenticated": True, "user": action.user, "error": None}
        )
    if isinstance(action, LoginFailure):
        return state.model_copy(update={"isLoading": False, "isAuthenticated": False, "error": action.message})
    if isinstance(action, Logout):
        return SessionState()
    if isinstance(action, ClearError):
        return state.model_copy(update={"error": None})
    return state
