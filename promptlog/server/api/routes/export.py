"""
CSV export API route.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from promptlog.export import ExportJob

from ..dependencies import get_export_job
from ..error_formatting import failure_response

router = APIRouter(tags=["export"])


@router.get("/download-csv")
async def download_csv(
    export_job: ExportJob = Depends(get_export_job),  # noqa: B008
):
    """
    Download every stored conversation as ``conversations.csv``.

    The transient file behind the download is removed once the transfer
    ends, whether it completed or not.
    """
    result = await export_job.export()

    if result.is_failure():
        # An empty history is reported under "message", real errors under "error"
        key = "message" if result.status_code == 404 else "error"
        return failure_response(result, message_key=key)

    artifact = result.unwrap()

    return StreamingResponse(
        artifact.stream(),
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"',
            "Content-Length": str(artifact.size_bytes),
        },
        background=BackgroundTask(artifact.release),
    )
