"""Static responder for the /images namespace."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse, Response

router = APIRouter(tags=["images"])


def resolve_image(images_dir: str, relative: str) -> Path | None:
    """Return the file for ``relative`` under ``images_dir``, or None.

    Paths that escape the images root are treated as absent.
    """
    try:
        root = Path(images_dir).resolve()
        candidate = (root / relative).resolve()
        if not candidate.is_relative_to(root) or not candidate.is_file():
            return None
    except (ValueError, OSError):
        # Unrepresentable names (e.g. embedded NUL) cannot exist on disk.
        return None
    return candidate


@router.get("/images/{image_path:path}", include_in_schema=False)
async def get_image(image_path: str, request: Request) -> Response:
    path = resolve_image(request.app.state.settings.images_dir, image_path)
    if path is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": "Image not found",
                "message": f"The requested image /images/{image_path} does not exist",
            },
        )
    return FileResponse(path)
