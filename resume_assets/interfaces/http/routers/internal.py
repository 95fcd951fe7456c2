"""Endpoints reserved for the PDF render worker."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from resume_assets.core.security import require_internal_secret
from resume_assets.interfaces.http.deps import get_print_service
from resume_assets.modules.printing import (
    BucketMissingError,
    PrintAssemblyError,
    PrintService,
    ResumeNotFoundError,
)
from resume_assets.schemas import PrintDataResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_internal_secret)])


@router.get(
    "/resume/print/{resume_id}",
    response_model=PrintDataResponse,
    summary="Render-ready resume content with inlined images",
)
async def resume_print_data(
    resume_id: int,
    service: PrintService = Depends(get_print_service),
) -> PrintDataResponse:
    try:
        data = await service.resume_print_data(resume_id)
    except ResumeNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="resume not found") from exc
    except PrintAssemblyError as exc:
        if isinstance(exc, BucketMissingError):
            logger.error("Print data for resume %s aborted, storage misconfigured: %s", resume_id, exc)
        else:
            logger.error("Print data for resume %s aborted: %s", resume_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to build print data",
        ) from exc
    return PrintDataResponse.model_validate(data.to_dict())
