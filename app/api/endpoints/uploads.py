from typing import Optional
from fastapi import APIRouter, File, Request, UploadFile

from app.api.deps import AdminAccess
from app.core.errors import BadRequest
from app.services.uploads import InvalidImage

router = APIRouter()

@router.post("/battlepass-image")
async def upload_battlepass_image(
    request: Request,
    _admin: AdminAccess,
    image: Optional[UploadFile] = File(None),
):
    if image is None:
        raise BadRequest("No image uploaded")
    try:
        image_url = await request.app.state.image_storage.save(image)
    except InvalidImage as e:
        raise BadRequest(str(e)) from e
    return {"image_url": image_url}
