import logging
import threading
from typing import Annotated, Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .admin import AdminAction, AdminState, reduce_admin
from .session import SessionAction, SessionState, reduce_session

log = logging.getLogger(__name__)


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth: SessionState = SessionState()
    admin: AdminState = AdminState()


Action = Annotated[Union[SessionAction, AdminAction], Field(discriminator="type")]

_action_adapter = TypeAdapter(Action)


def parse_action(data: Any):
    """Validate a raw ``{"type": ..., ...}`` message into a typed action."""
    return _action_adapter.validate_python(data)


def root_reducer(state: AppState, action) -> AppState:
    auth = reduce_session(state.auth, action)
    admin = reduce_admin(state.admin, action)
    if auth is state.auth and admin is state.admin:
        return state
    return state.model_copy(update={"auth": auth, "admin": admin})


Listener = Callable[[AppState, Any], None]


class Store:
    """Holds the current ``AppState`` snapshot and applies actions through a reducer."""

    def __init__(self, reducer: Callable[[AppState, Any], AppState] = root_reducer, state: Optional[AppState] = None):
        self._reducer = reducer
        self._state = state or AppState()
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action) -> AppState:
        with self._lock:
            new_state = self._reducer(self._state, action)
            changed = new_state is not self._state
            self._state = new_state
        log.debug("dispatch %s", getattr(action, "type", type(action).__name__))
        if changed:
            for listener in list(self._listeners):
                listener(new_state, action)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
