import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.dependencies import get_account_service
from app.auth.github.flow import AUTH_ISSUER
from app.tokens import InvalidToken, TokenService, get_token_service

from .schemas import VerifyTokenRequest, VerifyTokenResponse
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(
    payload: VerifyTokenRequest,
    tokens: TokenService = Depends(get_token_service),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Verify the post-auth token handed to the frontend after a social login.

    The frontend route `#/auth/verify-token?token=...` calls this endpoint to
    learn which profile the session belongs to.
    """
    try:
        claims = tokens.verify(payload.token, AUTH_ISSUER)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid-token"
        )

    profile_id = claims.get("profile-id")
    profile = await accounts.get_profile(profile_id) if profile_id else None
    if profile is None:
        logger.warning(f"Post-auth token references unknown profile {profile_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not-found")

    return VerifyTokenResponse(
        profile_id=profile.id, email=profile.email, fullname=profile.fullname
    )
