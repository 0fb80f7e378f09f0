import logging
from typing import Any, List

from ..api.client import ApiClient
from ..core.errors import ApiError
from ..models.developer import CreateDeveloperBody, RealEstateDeveloper, UpdateDeveloperBody
from ..state.store import Store
from .common import Outcome, error_text, parse_list, require_confirmation, run_mutation, validate_form

log = logging.getLogger(__name__)


def list_developers(client: ApiClient) -> List[RealEstateDeveloper]:
    try:
        return parse_list(client.list_developers(), RealEstateDeveloper) or []
    except ApiError as exc:
        log.exception("Failed to list developers: %s", error_text(exc))
        return []


def get_developer(client: ApiClient, developer_id: str) -> Any:
    return client.get_developer(developer_id)


def create_developer(client: ApiClient, store: Store, data: dict) -> Outcome:
    body = validate_form(CreateDeveloperBody, data)
    return run_mutation(
        store,
        lambda: client.create_developer(body),
        success_message="Developer created successfully",
        failure_message="Failed to create developer",
        require_id=True,
    )


def update_developer(client: ApiClient, store: Store, developer_id: str, data: dict) -> Outcome:
    body = validate_form(UpdateDeveloperBody, data)
    return run_mutation(
        store,
        lambda: client.update_developer(developer_id, body),
        success_message="Developer updated successfully",
        failure_message="Failed to update developer",
    )


def delete_developer(client: ApiClient, store: Store, developer_id: str, confirmed: bool = False) -> Outcome:
    require_confirmation(confirmed, "Are you sure you want to delete this developer?")
    return run_mutation(
        store,
        lambda: client.delete_developer(developer_id),
        success_message="Developer deleted successfully",
        failure_message="Failed to delete developer",
    )
