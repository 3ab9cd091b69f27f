"""Upload history endpoint."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException

from zhaiyao.dependencies import get_upload_repository, get_user_identifier
from zhaiyao.logging import setup_logging
from zhaiyao.repositories import UploadRepository
from zhaiyao.response_models import UploadHistoryItem

logger = setup_logging()

router = APIRouter(prefix="/uploads", tags=["uploads"])

RepositoryDep = Annotated[UploadRepository | None, Depends(get_upload_repository)]
UserDep = Annotated[str, Depends(get_user_identifier)]


@router.get("", response_model=List[UploadHistoryItem])
def list_uploads(repo: RepositoryDep, user_identifier: UserDep):
    """Returns the caller's uploads, newest first."""
    if not user_identifier:
        raise HTTPException(status_code=401, detail="Sign in to view upload history.")
    if repo is None:
        return []

    try:
        return [
            UploadHistoryItem.model_validate(row)
            for row in repo.list_by_user(user_identifier)
        ]
    except Exception as e:
        logger.error(f"Error listing uploads: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
