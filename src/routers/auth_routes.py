from fastapi import APIRouter, Depends
from src.auth import AuthContext, get_current_auth
from src.models.auth import MeResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=MeResponse)
async def get_me(auth: AuthContext = Depends(get_current_auth)):
    """Resolved role, effective permissions and capabilities for the caller.

    Rendering code decides which controls to show from ``capabilities``; the
    same predicates gate the corresponding mutations.
    """
    return MeResponse.from_context(auth)
