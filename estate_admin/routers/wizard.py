from typing import List

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services.project_wizard import ProjectWizard
from .uploads import image_edit, incoming_files

router = APIRouter(prefix="/wizard")


def get_wizard(context: DashboardContext = Depends(get_context)) -> ProjectWizard:
    if context.wizard is None or context.wizard.closed:
        raise HTTPException(status_code=404, detail="No project wizard in progress")
    return context.wizard


@router.post("")
def start_wizard(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    return context.start_wizard().view()


@router.get("")
def get_wizard_state(
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    return wizard.view()


@router.patch("/form")
def update_wizard_form(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    if not payload:
        raise HTTPException(status_code=400, detail="at least one field is required")
    for field, value in payload.items():
        wizard.update(field, value)
    return wizard.view()


@router.post("/amenities")
def add_amenity(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    name = payload.get("name") if isinstance(payload, dict) else None
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    return {"amenities": wizard.add_amenity(name)}


@router.delete("/amenities/{index}")
def remove_amenity(
    index: int,
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    return {"amenities": wizard.remove_amenity(index)}


@router.post("/next")
def next_step(
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
    client: ApiClient = Depends(get_api_client),
):
    wizard.next(client)
    return wizard.view()


@router.post("/back")
def previous_step(
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    wizard.back()
    return wizard.view()


@router.post("/images")
def add_images(
    files: List[UploadFile] = File(...),
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    errors = wizard.add_images(incoming_files(files))
    return {"errors": errors, **wizard.view()}


@router.patch("/images/{index}")
def update_image(
    index: int,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    image_type, caption = image_edit(payload)
    wizard.update_image(index, image_type=image_type, caption=caption)
    return wizard.view()


@router.delete("/images/{index}")
def discard_image(
    index: int,
    user: SessionUser = Depends(require_session),
    wizard: ProjectWizard = Depends(get_wizard),
):
    wizard.discard_image(index)
    return wizard.view()


@router.post("/submit")
def submit(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    wizard: ProjectWizard = Depends(get_wizard),
    client: ApiClient = Depends(get_api_client),
):
    result = wizard.submit(client)
    context.wizard = None
    return result


@router.delete("")
def cancel_wizard(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    wizard: ProjectWizard = Depends(get_wizard),
):
    wizard.close()
    context.wizard = None
    return {"closed": True}
