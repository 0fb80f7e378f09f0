import logging
from typing import Any, BinaryIO, Callable, Iterable, Optional, Tuple

import requests
from pydantic import BaseModel
from requests.utils import quote

from . import endpoints
from ..core.config import Settings, settings as default_settings
from ..core.errors import ApiDecodeError, ApiNetworkError, UnauthorizedError
from ..models.developer import CreateDeveloperBody, UpdateDeveloperBody
from ..models.employee import ChangePasswordBody, CreateEmployeeBody, UpdateEmployeeBody
from ..models.office import CreateOfficeBody, UpdateOfficeBody
from ..models.project import AssignEmployeeBody, DeleteImageBody, ProjectBody, PublishProjectBody
from ..models.user import LoginBody, RegisterBody

log = logging.getLogger(__name__)

# (filename, file object, content type) as accepted by requests' ``files=``
UploadFile = Tuple[str, BinaryIO, str]


def _path(template: str, **params: Any) -> str:
    return template.format(**{k: quote(str(v), safe="") for k, v in params.items()})


def _dump(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_none=True)
    return body


class ApiClient:
    """Thin client for the real-estate REST backend.

    Every call returns the decoded JSON body as-is. Transport and decode
    failures raise ``ApiError`` subclasses. A 401, either as the HTTP status or
    as a ``statusCode`` field in the body, runs ``on_unauthorized`` and raises
    ``UnauthorizedError``.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized

    @classmethod
    def from_settings(
        cls,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        config: Optional[Settings] = None,
    ) -> "ApiClient":
        config = config or default_settings
        return cls(
            config.api_base_url,
            token=token,
            session=session,
            timeout=config.request_timeout,
            on_unauthorized=on_unauthorized,
        )

    def _headers(self, json_body: bool = True) -> dict:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(self, method: str, path: str, body: Any = None, **kwargs) -> Any:
        url = self.base_url + path
        multipart = "files" in kwargs
        if body is not None:
            kwargs["json"] = _dump(body)
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(json_body=not multipart),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise ApiNetworkError(str(exc) or "Network error occurred") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            log.warning("%s %s returned a non-JSON body (HTTP %s)", method, url, response.status_code)
            raise ApiDecodeError("Invalid response from server", status_code=response.status_code) from exc

        log.debug("%s %s -> %s %r", method, url, response.status_code, payload)
        return self._inspect(response.status_code, payload)

    def _inspect(self, status_code: int, payload: Any) -> Any:
        body_status = payload.get("statusCode") if isinstance(payload, dict) else None
        if body_status == 401 or status_code == 401:
            message = payload.get("message") if isinstance(payload, dict) else None
            log.info("Backend rejected the session token; logging out")
            if self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError(message if isinstance(message, str) and message else "Unauthorized")
        return payload

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, body: Any = None) -> Any:
        return self._request("POST", path, body if body is not None else {})

    def patch(self, path: str, body: Any = None) -> Any:
        return self._request("PATCH", path, body if body is not None else {})

    def put(self, path: str, body: Any = None) -> Any:
        return self._request("PUT", path, body if body is not None else {})

    def delete(self, path: str, body: Any = None) -> Any:
        return self._request("DELETE", path, body)

    # Authentication

    def login(self, body: LoginBody) -> Any:
        return self.post(endpoints.LOGIN, body)

    def register(self, body: RegisterBody) -> Any:
        return self.post(endpoints.REGISTER, body)

    def get_profile(self) -> Any:
        return self.get(endpoints.USER_PROFILE)

    # Real estate developers

    def create_developer(self, body: CreateDeveloperBody) -> Any:
        return self.post(endpoints.DEVELOPERS, body)

    def list_developers(self) -> Any:
        return self.get(endpoints.DEVELOPERS)

    def get_developer(self, developer_id: str) -> Any:
        return self.get(_path(endpoints.DEVELOPER, id=developer_id))

    def update_developer(self, developer_id: str, body: UpdateDeveloperBody) -> Any:
        return self.patch(_path(endpoints.DEVELOPER, id=developer_id), body)

    def delete_developer(self, developer_id: str) -> Any:
        return self.delete(_path(endpoints.DEVELOPER, id=developer_id))

    # Offices

    def create_office(self, body: CreateOfficeBody) -> Any:
        return self.post(endpoints.OFFICES, body)

    def list_offices(self) -> Any:
        return self.get(endpoints.OFFICES)

    def get_office(self, office_id: str) -> Any:
        return self.get(_path(endpoints.OFFICE, id=office_id))

    def update_office(self, office_id: str, body: UpdateOfficeBody) -> Any:
        return self.patch(_path(endpoints.OFFICE, id=office_id), body)

    def delete_office(self, office_id: str) -> Any:
        return self.delete(_path(endpoints.OFFICE, id=office_id))

    # Employees

    def create_employee(self, body: CreateEmployeeBody) -> Any:
        return self.post(endpoints.EMPLOYEES, body)

    def list_employees(self) -> Any:
        return self.get(endpoints.EMPLOYEES)

    def get_employee(self, employee_id: str) -> Any:
        return self.get(_path(endpoints.EMPLOYEE, id=employee_id))

    def update_employee(self, employee_id: str, body: UpdateEmployeeBody) -> Any:
        return self.patch(_path(endpoints.EMPLOYEE, id=employee_id), body)

    def delete_employee(self, employee_id: str) -> Any:
        return self.delete(_path(endpoints.EMPLOYEE, id=employee_id))

    def change_password(self, body: ChangePasswordBody) -> Any:
        return self.post(endpoints.CHANGE_PASSWORD, body)

    # Projects

    def create_project(self, body: ProjectBody) -> Any:
        return self.post(endpoints.PROJECTS, body)

    def list_projects(self) -> Any:
        return self.get(endpoints.PROJECTS)

    def list_published_projects(self) -> Any:
        return self.get(endpoints.PUBLISHED_PROJECTS)

    def get_project(self, project_id: str) -> Any:
        return self.get(_path(endpoints.PROJECT, id=project_id))

    def update_project(self, project_id: str, body: ProjectBody) -> Any:
        return self.patch(_path(endpoints.PROJECT, id=project_id), body)

    def publish_project(self, project_id: str, body: PublishProjectBody) -> Any:
        return self.patch(_path(endpoints.PUBLISH_PROJECT, id=project_id), body)

    def assign_employee_to_project(self, project_id: str, body: AssignEmployeeBody) -> Any:
        return self.post(_path(endpoints.PROJECT_EMPLOYEES, id=project_id), body)

    def remove_employee_from_project(self, project_id: str, employee_id: str) -> Any:
        return self.delete(_path(endpoints.PROJECT_EMPLOYEE, id=project_id, employee_id=employee_id))

    def delete_project(self, project_id: str) -> Any:
        return self.delete(_path(endpoints.PROJECT, id=project_id))

    def upload_project_images(
        self,
        project_id: str,
        files: Iterable[UploadFile],
        image_type: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Any:
        """Upload a batch of images; ``image_type`` and ``caption`` apply to every file in it."""
        data = {}
        if image_type:
            data["type"] = image_type
        if caption:
            data["caption"] = caption
        return self._request(
            "POST",
            _path(endpoints.UPLOAD_PROJECT_IMAGES, id=project_id),
            files=[("images", f) for f in files],
            data=data,
        )

    def delete_project_image(self, project_id: str, body: DeleteImageBody) -> Any:
        return self.delete(_path(endpoints.PROJECT_IMAGES, id=project_id), body)

    # Misc

    def health_check(self) -> Any:
        return self.get(endpoints.HEALTH_CHECK)
