from typing import Any, List, Optional

from ..api.client import ApiClient
from ..models.forms import OfficeForm
from ..models.office import CreateOfficeBody, Office, UpdateOfficeBody
from ..state.admin import ResetOfficeForm, SetOffices, SetOfficeFormField
from ..state.store import Store
from .common import Outcome, refresh_list, require_confirmation, run_mutation, set_form_field, validate_form


def _blank_to_none(data: dict) -> dict:
    return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}


def refresh_offices(client: ApiClient, store: Store) -> Optional[List[Office]]:
    return refresh_list(store, client.list_offices, Office, lambda items: SetOffices(offices=items))


def set_office_field(store: Store, field: str, value: Any) -> None:
    set_form_field(store, SetOfficeFormField(field=field, value=value))


def reset_office_form(store: Store) -> None:
    store.dispatch(ResetOfficeForm())


def create_office(client: ApiClient, store: Store) -> Outcome:
    form = validate_form(OfficeForm, store.state.admin.officeForm.model_dump())
    body = CreateOfficeBody(**_blank_to_none(form.model_dump()))
    outcome = run_mutation(
        store,
        lambda: client.create_office(body),
        success_message="Office created successfully",
        failure_message="Failed to create office",
        refresh=lambda: refresh_offices(client, store),
        require_id=True,
    )
    if outcome.ok:
        store.dispatch(ResetOfficeForm())
    return outcome


def get_office(client: ApiClient, office_id: str) -> Any:
    return client.get_office(office_id)


def update_office(client: ApiClient, store: Store, office_id: str, data: dict) -> Outcome:
    body = validate_form(UpdateOfficeBody, data)
    return run_mutation(
        store,
        lambda: client.update_office(office_id, body),
        success_message="Office updated successfully",
        failure_message="Failed to update office",
        refresh=lambda: refresh_offices(client, store),
    )


def delete_office(client: ApiClient, store: Store, office_id: str, confirmed: bool = False) -> Outcome:
    require_confirmation(confirmed, "Are you sure you want to delete this office?")
    return run_mutation(
        store,
        lambda: client.delete_office(office_id),
        success_message="Office deleted successfully",
        failure_message="Failed to delete office",
        refresh=lambda: refresh_offices(client, store),
    )
