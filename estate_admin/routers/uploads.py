from typing import List

from fastapi import UploadFile

from ..services.image_service import IncomingFile


def incoming_files(files: List[UploadFile]) -> List[IncomingFile]:
    return [(f.filename or "image", f.content_type or "", f.file) for f in files]


def image_edit(payload: dict):
    """Pull ``type`` and ``caption`` out of an image edit body."""
    if not isinstance(payload, dict):
        return None, None
    return payload.get("type"), payload.get("caption")
