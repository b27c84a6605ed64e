# Central API router include file
from fastapi import APIRouter

# Import domain routers
from app.auth.account.router import router as account_router
from app.auth.github.router import router as github_auth_router

# Create main API router
api_router = APIRouter()

# Include domain routers
api_router.include_router(github_auth_router)
api_router.include_router(account_router)
