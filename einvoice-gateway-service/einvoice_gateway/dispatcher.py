"""
Turns a rendered artifact into an HTTP response.
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import Response
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from .schema import RenderedArtifact
from .scratch import ScratchSpace


def content_disposition(artifact: RenderedArtifact) -> Dict[str, str]:
    return {"Content-Disposition": f"attachment; filename={artifact.filename}"}


def dispatch(
    artifact: RenderedArtifact, scratch: Optional[ScratchSpace] = None
) -> Response:
    """
    Build the response for an artifact.

    pdf/docx are streamed from disk, and the scratch file is released once
    the response has been sent. json/html go out as an inline body.
    """
    headers = content_disposition(artifact)

    if artifact.is_file:
        cleanup = BackgroundTask(scratch.release, artifact.path) if scratch else None
        return FileResponse(
            artifact.path,
            media_type=artifact.media_type,
            headers=headers,
            background=cleanup,
        )

    return Response(
        content=artifact.body,
        media_type=artifact.media_type,
        headers=headers,
    )
