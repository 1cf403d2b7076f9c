"""API routes package."""

from fastapi import APIRouter

from federaltalks.api import auth, contracts, contacts, uploads, pipelines, favorites, admin

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
api_router.include_router(pipelines.router, prefix="/pipelines", tags=["pipelines"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
