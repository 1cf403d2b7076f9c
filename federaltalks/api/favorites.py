"""
Favorites API endpoints.

Bookmark toggle for contracts.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from federaltalks.api.deps import get_auth_session, get_store
from federaltalks.schemas.contract import ContractResponse
from federaltalks.schemas.pipeline import FavoriteToggleResponse
from federaltalks.services.auth import AuthSession
from federaltalks.services.store import TableStore

router = APIRouter()


@router.get("", response_model=List[ContractResponse])
async def list_favorites(
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """The current user's favorited contracts, most recently added first."""
    favorites = store.select("user_favorites", filters={"user_id": session.user_id}, order=["-created_at"])
    if not favorites:
        return []

    contracts = {
        c["id"]: c
        for c in store.select("contracts", filters={"id": [f["contract_id"] for f in favorites]})
    }
    return [contracts[f["contract_id"]] for f in favorites if f["contract_id"] in contracts]


@router.post("/{contract_id}", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    contract_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Add the contract to favorites, or remove it if already there."""
    if not store.select_one("contracts", {"id": contract_id}):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contract not found",
        )

    filters = {"user_id": session.user_id, "contract_id": contract_id}
    if store.delete("user_favorites", filters):
        return FavoriteToggleResponse(contract_id=contract_id, favorited=False)

    store.insert("user_favorites", [filters])
    return FavoriteToggleResponse(contract_id=contract_id, favorited=True)
