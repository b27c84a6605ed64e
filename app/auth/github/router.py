from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.auth.dependencies import get_github_flow

from .flow import OAuthFlow
from .schemas import AuthorizeResponse

router = APIRouter(prefix="/oauth/github", tags=["github-authentication"])


@router.api_route("", methods=["GET", "POST"], response_model=AuthorizeResponse)
async def login(request: Request, flow: OAuthFlow = Depends(get_github_flow)):
    """
    Start a GitHub login.

    Returns the GitHub authorize URL as JSON; the frontend redirects the
    browser to it. The URL carries a signed, short-lived CSRF state token.

    **Returns:**
    - redirect-uri: Complete GitHub OAuth URL to redirect to
    """
    result = await flow.initiate(request)
    return JSONResponse(result)


@router.get("/callback")
async def callback(request: Request, flow: OAuthFlow = Depends(get_github_flow)):
    """
    GitHub OAuth callback (query parameters: state, code).

    Always answers with a 302: to the frontend token verification page on
    success, or to the login page with error=unable-to-auth on any failure.
    """
    return await flow.callback(request)
