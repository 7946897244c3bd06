"""Dispatcher status endpoint."""

from fastapi import APIRouter

from releasebot.api.dependencies import DispatcherDep
from releasebot.api.models import APIResponse, DispatchStatsResponse

router = APIRouter(tags=["status"])


@router.get("/status", response_model=APIResponse[DispatchStatsResponse])
def get_status(dispatcher: DispatcherDep) -> APIResponse[DispatchStatsResponse]:
    """Counts of submitted, finished and pending event jobs."""
    stats = dispatcher.stats()
    return APIResponse(data=DispatchStatsResponse.model_validate(stats))
