"""Profile endpoint (read-only)."""

from fastapi import APIRouter, Depends

from src.api.deps import get_user_context
from src.core.models import ProfileResponse, UserContext
from src.services.storage.database import get_session
from src.services.storage.repository import RecordingRepository

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(user: UserContext = Depends(get_user_context)):
    async with get_session() as session:
        profile = await RecordingRepository(session).ensure_profile(user.user_id)
        return ProfileResponse.model_validate(profile)
