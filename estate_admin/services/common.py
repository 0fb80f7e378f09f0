import logging
from contextlib import contextmanager
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import ApiError, ConfirmationRequired, FormValidationError
from ..models.notice import Notice
from ..state.admin import SetError, SetLoading
from ..state.store import Store

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def response_message(response: Any, default: str) -> str:
    """Pull a human readable message out of an error body."""
    if isinstance(response, dict):
        message = response.get("message")
        if isinstance(message, list):
            message = ", ".join(str(m) for m in message if m)
        if message:
            return str(message)
    return default


def created_id(response: Any) -> Optional[str]:
    if isinstance(response, dict) and response.get("id") is not None:
        return str(response["id"])
    return None


def parse_list(response: Any, model: Type[M]) -> Optional[List[M]]:
    """Validate a list response; ``None`` when the body is not a list."""
    if not isinstance(response, list):
        return None
    items: List[M] = []
    for item in response:
        try:
            items.append(model.model_validate(item))
        except ValidationError:
            log.warning("Skipping malformed %s in list response", model.__name__)
    return items


def validate_form(schema: Type[M], data: Any) -> M:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise FormValidationError.from_validation_error(exc) from exc


def error_text(exc: Exception, default: str = "Network error occurred") -> str:
    if isinstance(exc, ApiError):
        return exc.message or default
    return str(exc) or default


@contextmanager
def admin_operation(store: Store):
    """Raise the shared loading flag for the duration of an admin call."""
    store.dispatch(SetLoading(value=True))
    try:
        yield
    finally:
        store.dispatch(SetLoading(value=False))


def refresh_list(store: Store, fetch: Callable[[], Any], model: Type[M], action: Callable[[Sequence[M]], Any]) -> Optional[List[M]]:
    """Refetch a resource list and replace it wholesale in the store."""
    try:
        items = parse_list(fetch(), model)
    except ApiError as exc:
        log.exception("Failed to refresh %s list", model.__name__)
        store.dispatch(SetError(message=error_text(exc)))
        return None
    if items is not None:
        store.dispatch(action(tuple(items)))
    return items


def is_error_body(response: Any) -> bool:
    if not isinstance(response, dict):
        return False
    status = response.get("statusCode")
    return (isinstance(status, int) and status >= 400) or "error" in response


class Outcome(BaseModel):
    """Result of a dashboard operation: the notice to show plus the raw response."""

    ok: bool
    notice: Notice
    data: Any = None


def set_form_field(store: Store, action) -> None:
    try:
        store.dispatch(action)
    except ValidationError as exc:
        raise FormValidationError.from_validation_error(exc) from exc


def require_confirmation(confirmed: bool, prompt: str) -> None:
    if not confirmed:
        raise ConfirmationRequired(prompt)


def run_mutation(
    store: Store,
    call: Callable[[], Any],
    success_message: str,
    failure_message: str,
    refresh: Optional[Callable[[], Any]] = None,
    require_id: bool = False,
    on_success: Optional[Callable[[Any], Any]] = None,
) -> Outcome:
    """One API call, then a refetch of the affected list and a notice.

    Failures land in the shared admin error and in the returned notice.
    """
    with admin_operation(store):
        try:
            response = call()
        except ApiError as exc:
            log.exception("%s", failure_message)
            message = error_text(exc)
            store.dispatch(SetError(message=message))
            return Outcome(ok=False, notice=Notice.error(message))

        failed = created_id(response) is None if require_id else is_error_body(response)
        if failed:
            message = response_message(response, failure_message)
            store.dispatch(SetError(message=message))
            return Outcome(ok=False, notice=Notice.error(message), data=response)

        if on_success:
            on_success(response)
        if refresh:
            refresh()
        store.dispatch(SetError(message=None))
        return Outcome(ok=True, notice=Notice.success(success_message), data=response)
