"""Image upload endpoints."""
from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse

from prep_admin.dependencies import CurrentSession
from prep_admin.services.image_service import get_image_path, store_image
from prep_admin.services.permission_service import Action, require_permission

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/images", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    session: CurrentSession,
    folder: str = "questions",
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Store an image and return its durable URL."""
    require_permission(session, Action.CREATE)
    url, size = await store_image(file, folder, request.app.state.uploads_dir)
    return {"url": url, "size": size}


@router.get("/{folder}/{filename}")
def get_image(folder: str, filename: str, request: Request) -> FileResponse:
    path = get_image_path(request.app.state.uploads_dir, folder, filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path)
