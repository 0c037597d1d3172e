"""
Image upload routes for BlogQL API.

Post images are uploaded here first; the returned ``filePath`` is then
passed as ``imageUrl`` to the ``createPost`` / ``updatePost`` mutations.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from blogql.api.dependencies import get_image_store
from blogql.api.middleware.auth import get_caller
from blogql.api.schemas import ImageUploadResponse
from blogql.auth.context import CallerIdentity
from blogql.storage.images import ALLOWED_IMAGE_TYPES, ImageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.put(
    "/post-image",
    response_model=ImageUploadResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    summary="Upload post image",
    description="Store an image for a post, optionally removing the image it replaces.",
)
async def upload_post_image(
    image: Optional[UploadFile] = File(None),
    old_path: Optional[str] = Form(None, alias="oldPath"),
    caller: CallerIdentity = Depends(get_caller),
    images: ImageStore = Depends(get_image_store),
):
    """
    Upload a post image.

    Accepts PNG or JPEG images. Requires an authenticated caller.
    """
    if not caller.is_auth:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated!",
        )

    if image is None:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"message": "No file provided!"},
        )

    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed: {', '.join(ALLOWED_IMAGE_TYPES)}",
        )

    if old_path:
        images.clear_image(old_path)

    contents = await image.read()
    file_path = images.save(image.filename, contents)

    return ImageUploadResponse(message="File stored.", file_path=file_path)
