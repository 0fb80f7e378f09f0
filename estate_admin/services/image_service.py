import logging
from tempfile import SpooledTemporaryFile
from typing import Any, BinaryIO, Dict, Iterable, List, Optional, Tuple

from ..api.client import ApiClient, UploadFile
from ..core.errors import ApiError, FormValidationError
from ..models.notice import Notice
from ..models.project import IMAGE_TYPES, DeleteImageBody, Project, ProjectImage
from ..state.store import Store
from .common import Outcome, error_text, require_confirmation
from .project_service import refresh_projects

log = logging.getLogger(__name__)

# Kept in memory up to this size, then spilled to disk
SPOOL_MAX_SIZE = 1024 * 1024

# (filename, content type, stream) as received from a multipart form
IncomingFile = Tuple[str, str, BinaryIO]


class PendingImage:
    """An image picked for upload but not sent yet. Owns a temporary buffer."""

    def __init__(self, filename: str, content_type: str, buffer, size: int):
        self.filename = filename
        self.content_type = content_type
        self.size = size
        self.type = "OTHER"
        self.caption = ""
        self._buffer = buffer

    @property
    def released(self) -> bool:
        return self._buffer.closed

    def as_upload(self) -> UploadFile:
        self._buffer.seek(0)
        return (self.filename, self._buffer, self.content_type)

    def release(self) -> None:
        if not self._buffer.closed:
            self._buffer.close()

    def describe(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "contentType": self.content_type,
            "size": self.size,
            "type": self.type,
            "caption": self.caption,
        }


def _spool(stream: BinaryIO, limit: int) -> Tuple[SpooledTemporaryFile, int]:
    """Copy ``stream`` into a temporary buffer, stopping once it exceeds ``limit``."""
    buffer = SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE)
    size = 0
    while True:
        chunk = stream.read(64 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            break
        buffer.write(chunk)
    buffer.seek(0)
    return buffer, size


class ImageSelection:
    """Images queued for upload, capped together with images already stored.

    ``reserved`` counts the slots taken by images already on the project.
    """

    def __init__(self, limit: int, max_bytes: int, reserved: int = 0):
        self.limit = limit
        self.max_bytes = max_bytes
        self.reserved = reserved
        self.images: List[PendingImage] = []

    def __len__(self) -> int:
        return len(self.images)

    @property
    def remaining_slots(self) -> int:
        return max(self.limit - self.reserved - len(self.images), 0)

    def add(self, files: Iterable[IncomingFile]) -> List[str]:
        """Queue valid images; returns one message per rejected file."""
        errors: List[str] = []
        max_mb = self.max_bytes // (1024 * 1024)
        for filename, content_type, stream in files:
            if self.remaining_slots <= 0:
                errors.append(f"File {filename} was not added. Maximum of {self.limit} images reached")
                continue
            if not (content_type or "").startswith("image/"):
                errors.append(f"File {filename} is not an image")
                continue
            buffer, size = _spool(stream, self.max_bytes)
            if size > self.max_bytes:
                buffer.close()
                errors.append(f"File {filename} is too large. Maximum size is {max_mb}MB")
                continue
            self.images.append(PendingImage(filename, content_type, buffer, size))
        return errors

    def _get(self, index: int) -> PendingImage:
        if not 0 <= index < len(self.images):
            raise FormValidationError({"images": [f"No pending image at position {index}"]})
        return self.images[index]

    def update(self, index: int, image_type: Optional[str] = None, caption: Optional[str] = None) -> PendingImage:
        image = self._get(index)
        if image_type is not None:
            if image_type not in IMAGE_TYPES:
                raise FormValidationError({"type": [f"Image type must be one of {', '.join(IMAGE_TYPES)}"]})
            image.type = image_type
        if caption is not None:
            image.caption = caption
        return image

    def discard(self, index: int) -> None:
        image = self._get(index)
        image.release()
        del self.images[index]

    def groups(self) -> List[Tuple[Tuple[str, str], List[PendingImage]]]:
        """Pending images grouped by ``(type, caption)`` in first-seen order."""
        grouped: Dict[Tuple[str, str], List[PendingImage]] = {}
        for image in self.images:
            grouped.setdefault((image.type, image.caption or ""), []).append(image)
        return list(grouped.items())

    def release_all(self) -> None:
        for image in self.images:
            image.release()
        self.images = []

    def describe(self) -> List[Dict[str, Any]]:
        return [image.describe() for image in self.images]


def upload_groups(client: ApiClient, project_id: str, selection: ImageSelection) -> int:
    """Upload every pending image, one request per ``(type, caption)`` group.

    The backend applies one type/caption pair to all files of a request.
    Returns the number of files sent; raises ``ApiError`` on the first group
    the backend does not accept.
    """
    total = 0
    for (image_type, caption), images in selection.groups():
        response = client.upload_project_images(
            project_id,
            [image.as_upload() for image in images],
            image_type=image_type,
            caption=caption or None,
        )
        if not isinstance(response, list):
            raise ApiError("Failed to upload images")
        total += len(images)
    return total


class ProjectImageManager:
    """Image editing for a project that already exists."""

    def __init__(self, project: Project, limit: int, max_bytes: int):
        self.project_id = project.id
        self.existing: List[ProjectImage] = list(project.images)
        self.selection = ImageSelection(limit, max_bytes, reserved=len(self.existing))
        self.error: Optional[str] = None

    def add_files(self, files: Iterable[IncomingFile]) -> List[str]:
        errors = self.selection.add(files)
        self.error = errors[-1] if errors else None
        return errors

    def delete_existing(self, client: ApiClient, store: Store, image_url: str, confirmed: bool = False) -> Outcome:
        """Delete a stored image; it leaves the list only once the backend confirms."""
        require_confirmation(confirmed, "Are you sure you want to delete this image? This action cannot be undone.")
        try:
            response = client.delete_project_image(self.project_id, DeleteImageBody(imageUrl=image_url))
        except ApiError as exc:
            log.exception("Failed to delete image %s of project %s", image_url, self.project_id)
            self.error = error_text(exc, "Failed to delete image. Please try again.")
            return Outcome(ok=False, notice=Notice.error(self.error))

        message = response.get("message") if isinstance(response, dict) else None
        if not (isinstance(message, str) and "successfully" in message):
            self.error = "Failed to delete image"
            return Outcome(ok=False, notice=Notice.error(self.error), data=response)

        self.existing = [image for image in self.existing if image.url != image_url]
        self.selection.reserved = len(self.existing)
        self.error = None
        refresh_projects(client, store)
        return Outcome(ok=True, notice=Notice.success("Image deleted successfully"), data=response)

    def upload(self, client: ApiClient, store: Store) -> Outcome:
        if not self.selection:
            refresh_projects(client, store)
            return Outcome(ok=True, notice=Notice(level="info", message="No new images to upload"))

        try:
            total = upload_groups(client, self.project_id, self.selection)
        except ApiError as exc:
            log.exception("Image upload failed for project %s", self.project_id)
            self.error = error_text(exc, "Failed to upload some images. Please try again.")
            return Outcome(ok=False, notice=Notice.error(self.error))

        self.selection.release_all()
        self.error = None
        refresh_projects(client, store)
        plural = "s" if total > 1 else ""
        return Outcome(ok=True, notice=Notice.success(f"Successfully uploaded {total} image{plural}!"))

    def close(self) -> None:
        self.selection.release_all()

    def view(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "existing": [image.model_dump() for image in self.existing],
            "pending": self.selection.describe(),
            "remainingSlots": self.selection.remaining_slots,
            "limit": self.selection.limit,
            "error": self.error,
        }
