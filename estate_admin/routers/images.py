from typing import List

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import project_service
from ..services.image_service import ProjectImageManager
from .uploads import image_edit, incoming_files

router = APIRouter(prefix="/projects/{project_id}/images")


def get_manager(project_id: str, context: DashboardContext = Depends(get_context)) -> ProjectImageManager:
    manager = context.image_managers.get(project_id)
    if manager is None:
        raise HTTPException(status_code=404, detail="Image manager is not open for this project")
    return manager


@router.post("/manager")
def open_manager(
    project_id: str,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    project = project_service.find_project(context.store, project_id) or project_service.get_project(client, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    previous = context.image_managers.pop(project_id, None)
    if previous is not None:
        previous.close()
    manager = ProjectImageManager(project, context.settings.max_project_images, context.settings.max_image_bytes)
    context.image_managers[project_id] = manager
    return manager.view()


@router.get("/manager")
def get_manager_state(
    user: SessionUser = Depends(require_session),
    manager: ProjectImageManager = Depends(get_manager),
):
    return manager.view()


@router.post("/pending")
def add_images(
    files: List[UploadFile] = File(...),
    user: SessionUser = Depends(require_session),
    manager: ProjectImageManager = Depends(get_manager),
):
    errors = manager.add_files(incoming_files(files))
    return {"errors": errors, **manager.view()}


@router.patch("/pending/{index}")
def update_image(
    index: int,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    manager: ProjectImageManager = Depends(get_manager),
):
    image_type, caption = image_edit(payload)
    manager.selection.update(index, image_type=image_type, caption=caption)
    return manager.view()


@router.delete("/pending/{index}")
def discard_image(
    index: int,
    user: SessionUser = Depends(require_session),
    manager: ProjectImageManager = Depends(get_manager),
):
    manager.selection.discard(index)
    return manager.view()


@router.delete("")
def delete_image(
    payload: dict = Body(...),
    confirm: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    manager: ProjectImageManager = Depends(get_manager),
    client: ApiClient = Depends(get_api_client),
):
    image_url = payload.get("imageUrl") if isinstance(payload, dict) else None
    if not image_url:
        raise HTTPException(status_code=400, detail="imageUrl is required")
    outcome = manager.delete_existing(client, context.store, image_url, confirmed=confirm)
    return {"outcome": outcome, **manager.view()}


@router.post("/upload")
def upload_images(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    manager: ProjectImageManager = Depends(get_manager),
    client: ApiClient = Depends(get_api_client),
):
    outcome = manager.upload(client, context.store)
    return {"outcome": outcome, **manager.view()}


@router.delete("/manager")
def close_manager(
    project_id: str,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    manager: ProjectImageManager = Depends(get_manager),
):
    manager.close()
    context.image_managers.pop(project_id, None)
    return {"closed": True}
