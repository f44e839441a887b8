"""
AI Assist API Endpoints
"""
from fastapi import APIRouter, Depends

from jobdesk.api.deps import get_ai_service, get_current_user
from jobdesk.core.permissions import Capability
from jobdesk.core.security import TokenClaims
from jobdesk.schemas.ai import AutoCompleteRequest, AutoCompleteResponse
from jobdesk.services.ai_assist import AIAssistService
from jobdesk.services.users import require_capability

router = APIRouter(prefix="/ai", tags=["AI Assist"])


@router.post("/auto-complete", response_model=AutoCompleteResponse)
def auto_complete(
    payload: AutoCompleteRequest,
    current_user: TokenClaims = Depends(get_current_user),
    ai_service: AIAssistService = Depends(get_ai_service),
):
    """
    Draft summary, responsibilities and skills from a job title
    Used while creating a job; nothing is saved
    """
    require_capability(current_user, Capability.CREATE_JOBS)
    return {"success": True, "data": ai_service.auto_complete(payload.jobTitle)}
