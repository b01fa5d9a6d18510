# app/routers/upload_router.py
import logging
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from ..dependencies import get_photo_service
from ..exceptions import APIException, create_success_response
from ..application.services.photo_service import PhotoService
from ..schemas import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])


async def _read_payload(request: Request) -> dict:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise APIException(status_code=400, detail="Validation failed", details="body: invalid JSON")
        if not isinstance(body, dict):
            raise APIException(status_code=400, detail="Validation failed", details="body: expected an object")
        return body
    form = await request.form()
    return {"file": form.get("file"), "folder": form.get("folder")}


@router.post("/photo", responses={400: {"model": ApiResponse}})
async def upload_photo(request: Request, photos: PhotoService = Depends(get_photo_service)):
    """Upload a photo.

    Accepts multipart form data with a binary `file` part, or a `file` field
    (form or JSON) holding a URL, data URL or base64 string. `folder` is optional.
    """
    payload = await _read_payload(request)
    file = payload.get("file")
    folder = payload.get("folder") or None
    if folder is not None and not isinstance(folder, str):
        raise APIException(status_code=400, detail="Validation failed", details="folder: must be a string")

    if isinstance(file, UploadFile):
        result = await photos.upload_bytes(await file.read(), folder)
    elif isinstance(file, str) and file.strip():
        result = await photos.upload_source(file, folder)
    else:
        raise APIException(status_code=400, detail="Validation failed", details="file is required")
    return create_success_response("Photo uploaded successfully", data=result)
