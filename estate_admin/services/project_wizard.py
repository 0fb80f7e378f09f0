"""Guided, multi-step project creation.

The wizard walks eight steps. Steps one to seven edit the pending project form
held in the admin store and must validate before moving on; leaving the legal
step creates the project on the backend. The images step then uploads the
selected pictures against the new project id.
"""
import logging
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel

from ..api.client import ApiClient
from ..core.errors import ApiError, FormValidationError
from ..models.forms import (
    AmenitiesStep,
    BasicInfoStep,
    LegalStep,
    LocationStep,
    ManagementStep,
    PricingStep,
    PropertyDetailsStep,
)
from ..models.notice import Notice
from ..models.project import ProjectBody
from ..state.store import Store
from .common import created_id, error_text, response_message, validate_form
from .image_service import ImageSelection, IncomingFile, upload_groups
from .project_service import add_amenity, clean_project_values, refresh_projects, remove_amenity, reset_project_form, set_project_field

log = logging.getLogger(__name__)

PARTIAL_UPLOAD_MESSAGE = "Project created successfully, but some images failed to upload"


class WizardStep(IntEnum):
    BASIC_INFO = 1
    LOCATION = 2
    PROPERTY_DETAILS = 3
    MANAGEMENT = 4
    AMENITIES = 5
    PRICING = 6
    LEGAL = 7
    IMAGES = 8


STEP_LABELS: Dict[WizardStep, str] = {
    WizardStep.BASIC_INFO: "Basic Info",
    WizardStep.LOCATION: "Location",
    WizardStep.PROPERTY_DETAILS: "Property Details",
    WizardStep.MANAGEMENT: "Management",
    WizardStep.AMENITIES: "Amenities",
    WizardStep.PRICING: "Pricing",
    WizardStep.LEGAL: "Legal Info",
    WizardStep.IMAGES: "Images",
}

# The images step has no form fields to check.
STEP_SCHEMAS: Dict[WizardStep, Type[BaseModel]] = {
    WizardStep.BASIC_INFO: BasicInfoStep,
    WizardStep.LOCATION: LocationStep,
    WizardStep.PROPERTY_DETAILS: PropertyDetailsStep,
    WizardStep.MANAGEMENT: ManagementStep,
    WizardStep.AMENITIES: AmenitiesStep,
    WizardStep.PRICING: PricingStep,
    WizardStep.LEGAL: LegalStep,
}


class WizardResult(BaseModel):
    ok: bool
    closed: bool
    notice: Notice
    closeAfter: float = 0


class ProjectWizard:
    def __init__(self, store: Store, max_images: int, max_image_bytes: int, close_delay: float = 2.0):
        self.store = store
        self.close_delay = close_delay
        self.step = WizardStep.BASIC_INFO
        self.project_id: Optional[str] = None
        self.error: Optional[str] = None
        self.notice: Optional[Notice] = None
        self.is_loading = False
        self.closed = False
        self.images = ImageSelection(max_images, max_image_bytes)
        reset_project_form(store)
        # The wizard collects amenities one by one instead of starting with a blank row
        set_project_field(store, "amenities", [])

    def _ensure_open(self) -> None:
        if self.closed:
            raise FormValidationError({"wizard": ["The wizard is closed"]})

    # Form editing

    def update(self, field: str, value: Any) -> None:
        self._ensure_open()
        set_project_field(self.store, field, value)

    def add_amenity(self, name: str) -> List[str]:
        self._ensure_open()
        return add_amenity(self.store, name)

    def remove_amenity(self, index: int) -> List[str]:
        self._ensure_open()
        return remove_amenity(self.store, index)

    def validate_step(self, step: WizardStep) -> None:
        schema = STEP_SCHEMAS.get(step)
        if schema is None:
            return
        draft = self.store.state.admin.projectForm.model_dump()
        validate_form(schema, {name: draft[name] for name in schema.model_fields})

    # Navigation

    def next(self, client: ApiClient) -> WizardStep:
        """Validate the current step and move forward.

        Leaving the legal step creates the project; the wizard only reaches the
        images step once the backend has returned the new project id.
        """
        self._ensure_open()
        self.validate_step(self.step)
        if self.step == WizardStep.LEGAL and not self.project_id:
            for step in STEP_SCHEMAS:
                self.validate_step(step)
            self._create_project(client)
        elif self.step < WizardStep.IMAGES:
            self.step = WizardStep(self.step + 1)
        return self.step

    def back(self) -> WizardStep:
        self._ensure_open()
        if self.step == WizardStep.IMAGES and self.project_id:
            return self.step
        if self.step > WizardStep.BASIC_INFO:
            self.step = WizardStep(self.step - 1)
        return self.step

    def _create_project(self, client: ApiClient) -> None:
        values = clean_project_values(self.store.state.admin.projectForm.model_dump())
        values.update(approvals=[], floorPlans=[], images=[], brochures=[])
        body = ProjectBody(**values)

        self.is_loading = True
        self.error = None
        try:
            response = client.create_project(body)
        except ApiError as exc:
            log.exception("Project creation failed")
            self.error = error_text(exc)
            self.notice = Notice.error(self.error)
            return
        finally:
            self.is_loading = False

        project_id = created_id(response)
        if project_id is None:
            self.error = response_message(response, "Failed to create project")
            self.notice = Notice.error(self.error)
            return

        log.info("Created project %s", project_id)
        self.project_id = project_id
        self.notice = Notice.success("Project created successfully")
        self.step = WizardStep.IMAGES

    # Images

    def _require_images_step(self) -> None:
        self._ensure_open()
        if self.step != WizardStep.IMAGES or not self.project_id:
            raise FormValidationError({"images": ["Images can be added once the project is created"]})

    def add_images(self, files: Iterable[IncomingFile]) -> List[str]:
        self._require_images_step()
        errors = self.images.add(files)
        self.error = errors[-1] if errors else None
        return errors

    def update_image(self, index: int, image_type: Optional[str] = None, caption: Optional[str] = None) -> None:
        self._require_images_step()
        self.images.update(index, image_type=image_type, caption=caption)

    def discard_image(self, index: int) -> None:
        self._require_images_step()
        self.images.discard(index)

    def submit(self, client: ApiClient) -> WizardResult:
        """Upload the selected images and close the wizard.

        The project already exists at this point, so an upload failure is
        reported as a partial success and the wizard still closes after
        ``close_delay`` seconds.
        """
        self._require_images_step()
        if not self.images:
            self.close()
            refresh_projects(client, self.store)
            return WizardResult(ok=True, closed=True, notice=Notice.success("Project created successfully"))

        self.is_loading = True
        self.error = None
        try:
            total = upload_groups(client, self.project_id, self.images)
        except ApiError:
            log.exception("Image upload failed for new project %s", self.project_id)
            self.error = PARTIAL_UPLOAD_MESSAGE
            self.close()
            refresh_projects(client, self.store)
            return WizardResult(
                ok=False,
                closed=True,
                notice=Notice.error(PARTIAL_UPLOAD_MESSAGE),
                closeAfter=self.close_delay,
            )
        finally:
            self.is_loading = False

        self.close()
        refresh_projects(client, self.store)
        plural = "s" if total > 1 else ""
        return WizardResult(ok=True, closed=True, notice=Notice.success(f"{total} image{plural} uploaded successfully!"))

    def close(self) -> None:
        """Drop pending image buffers and the pending form."""
        self.images.release_all()
        if not self.closed:
            reset_project_form(self.store)
        self.closed = True

    def view(self) -> Dict[str, Any]:
        steps = []
        for step in WizardStep:
            steps.append(
                {
                    "id": int(step),
                    "key": step.name,
                    "name": STEP_LABELS[step],
                    "active": step == self.step,
                    "completed": step < self.step or bool(self.project_id and step <= WizardStep.LEGAL),
                }
            )
        return {
            "step": int(self.step),
            "stepKey": self.step.name,
            "steps": steps,
            "projectId": self.project_id,
            "isLoading": self.is_loading,
            "error": self.error,
            "notice": self.notice.model_dump() if self.notice else None,
            "closed": self.closed,
            "form": self.store.state.admin.projectForm.model_dump(),
            "images": self.images.describe(),
            "remainingSlots": self.images.remaining_slots,
        }
