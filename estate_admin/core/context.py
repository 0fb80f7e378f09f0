from typing import Dict, Optional

import requests
from fastapi import Depends, Request

from .auth import get_access_token
from .config import Settings
from .errors import UnauthorizedError
from ..api.client import ApiClient
from ..models.user import SessionUser
from ..services import auth_service
from ..services.image_service import ProjectImageManager
from ..services.project_wizard import ProjectWizard
from ..state.snapshot import SnapshotStore
from ..state.store import Store


class DashboardContext:
    """Process-wide state of the dashboard: one operator, one store."""

    def __init__(self, config: Settings, http: Optional[requests.Session] = None):
        self.settings = config
        self.store = Store()
        self.snapshots = SnapshotStore(config.session_snapshot_path)
        self.http = http or requests.Session()
        self.wizard: Optional[ProjectWizard] = None
        self.image_managers: Dict[str, ProjectImageManager] = {}

    def client(self, token: Optional[str]) -> ApiClient:
        return ApiClient.from_settings(
            token=token,
            session=self.http,
            on_unauthorized=self.force_logout,
            config=self.settings,
        )

    def force_logout(self) -> None:
        self.discard_workspaces()
        auth_service.logout(self.store, self.snapshots)

    def start_wizard(self) -> ProjectWizard:
        if self.wizard is not None:
            self.wizard.close()
        self.wizard = ProjectWizard(
            self.store,
            self.settings.max_project_images,
            self.settings.max_image_bytes,
            self.settings.wizard_close_delay,
        )
        return self.wizard

    def discard_workspaces(self) -> None:
        """Release every pending image buffer held by open editors."""
        if self.wizard is not None:
            self.wizard.close()
            self.wizard = None
        for manager in self.image_managers.values():
            manager.close()
        self.image_managers.clear()

    def close(self) -> None:
        self.discard_workspaces()
        self.http.close()


def get_context(request: Request) -> DashboardContext:
    return request.app.state.context


def get_api_client(request: Request, context: DashboardContext = Depends(get_context)) -> ApiClient:
    return context.client(get_access_token(request, context.settings))


def require_session(request: Request, context: DashboardContext = Depends(get_context)) -> SessionUser:
    token = get_access_token(request, context.settings)
    if not token:
        if context.store.state.auth.isAuthenticated:
            context.force_logout()
        raise UnauthorizedError("Not logged in")
    if not auth_service.restore_session(context.store, context.snapshots, token):
        context.force_logout()
        raise UnauthorizedError("Session expired")
    return context.store.state.auth.user
