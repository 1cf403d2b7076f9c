"""
Contracts API endpoints.

Listing, manual entry, editing, status transitions, relevance search and
plain-text downloads for procurement contracts.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from federaltalks.api.deps import get_auth_session, get_store, require_permission
from federaltalks.config import settings
from federaltalks.schemas.contract import (
    ContractCreate,
    ContractListResponse,
    ContractResponse,
    ContractSearchRequest,
    ContractSearchResponse,
    ContractStatusUpdate,
    ContractUpdate,
)
from federaltalks.services.auth import AuthSession
from federaltalks.services.errors import ReportGenerationError, StoreError
from federaltalks.services.reports import (
    REPORT_KINDS,
    ReportGenerator,
    get_report_generator,
    render_contract_summary,
    report_filename,
)
from federaltalks.services.search import SearchFacets, search_contracts, tokenize
from federaltalks.services.store import TableStore

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCHABLE_FIELDS = ("federal_id", "contract_name", "title", "agency")


def get_contract_or_404(store: TableStore, contract_id: UUID) -> dict:
    contract = store.select_one("contracts", {"id": contract_id})
    if not contract:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contract not found",
        )
    return contract


def _text_download(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Listing & Search
# =============================================================================

@router.get("", response_model=ContractListResponse)
async def list_contracts(
    status_filter: Optional[str] = Query(None, alias="status"),
    contract_type: Optional[str] = None,
    state: Optional[str] = None,
    q: Optional[str] = Query(None, description="Substring match on federal ID, name, title or agency"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """List contracts, newest first."""
    filters = {}
    if status_filter:
        filters["status"] = status_filter
    if contract_type:
        filters["contract_type"] = contract_type
    if state:
        filters["state"] = state

    rows = store.select("contracts", filters=filters, order=["-posted_date"])

    if q:
        needle = q.lower()
        rows = [
            row for row in rows
            if any(needle in (row.get(name) or "").lower() for name in SEARCHABLE_FIELDS)
        ]

    return ContractListResponse(items=rows[offset:offset + limit], total=len(rows))


@router.post("/search", response_model=ContractSearchResponse)
async def search(
    request: ContractSearchRequest,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """
    Relevance search over active contracts.

    Candidates are fetched newest first; equal scores keep that order.
    """
    candidates = store.select(
        "contracts",
        filters={"status": "active"},
        order=["-posted_date"],
        limit=settings.search_candidate_limit,
    )
    facets = SearchFacets(
        contract_type=request.contract_type,
        state=request.state,
        naics_code=request.naics_code,
        budget_min=request.budget_min,
        budget_max=request.budget_max,
        set_aside=request.set_aside,
        deadline=request.deadline,
    )
    hits = search_contracts(request.query, candidates, facets)

    return ContractSearchResponse(
        query=request.query,
        mode="search" if tokenize(request.query) else "browse",
        total=len(hits),
        results=[{"score": hit.score, "contract": hit.contract} for hit in hits],
    )


# =============================================================================
# CRUD
# =============================================================================

@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
async def create_contract(
    contract_data: ContractCreate,
    session: AuthSession = Depends(require_permission("add_contracts")),
    store: TableStore = Depends(get_store),
):
    """Create a contract by manual entry."""
    now = datetime.utcnow()
    row = contract_data.model_dump()
    row["contract_name"] = row.get("contract_name") or row["title"]
    row["buying_organization"] = row.get("buying_organization") or row["agency"]
    row["contract_type"] = row.get("contract_type") or "federal"
    row["status"] = row.get("status") or "active"
    row["contract_status"] = row.get("contract_status") or "open"
    row["keywords"] = row.get("keywords") or []
    row.update({
        "data_source": "manual",
        "updated_by": session.user_id,
        "posted_date": now,
        "last_updated": now,
    })

    try:
        [contract] = store.insert("contracts", [row])
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error creating contract: {e}",
        )

    logger.info(f"Contract {contract['federal_id']} created by {session.email}")
    return contract


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Get a single contract."""
    return get_contract_or_404(store, contract_id)


@router.patch("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: UUID,
    contract_data: ContractUpdate,
    session: AuthSession = Depends(require_permission("edit_contracts")),
    store: TableStore = Depends(get_store),
):
    """Update contract fields. The federal ID never changes."""
    get_contract_or_404(store, contract_id)

    patch = contract_data.model_dump(exclude_unset=True)
    patch.update({"last_updated": datetime.utcnow(), "updated_by": session.user_id})

    try:
        store.update("contracts", patch, {"id": contract_id})
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error updating contract: {e}",
        )

    return get_contract_or_404(store, contract_id)


@router.post("/{contract_id}/status", response_model=ContractResponse)
async def update_contract_status(
    contract_id: UUID,
    status_data: ContractStatusUpdate,
    session: AuthSession = Depends(require_permission("edit_contracts")),
    store: TableStore = Depends(get_store),
):
    """Move a contract between lifecycle / procurement statuses."""
    get_contract_or_404(store, contract_id)

    patch = status_data.model_dump(exclude_none=True)
    if not patch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide status and/or contract_status",
        )
    patch.update({"last_updated": datetime.utcnow(), "updated_by": session.user_id})
    store.update("contracts", patch, {"id": contract_id})

    logger.info(f"Contract {contract_id} status -> {status_data.status or '-'} / {status_data.contract_status or '-'}")
    return get_contract_or_404(store, contract_id)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(
    contract_id: UUID,
    session: AuthSession = Depends(require_permission("delete_contracts")),
    store: TableStore = Depends(get_store),
):
    """Permanently delete a contract along with its favorites and pipeline entries."""
    contract = get_contract_or_404(store, contract_id)

    store.delete("user_favorites", {"contract_id": contract_id})
    store.delete("pipeline_entries", {"contract_id": contract_id})
    store.delete("contracts", {"id": contract_id})

    logger.info(f"Contract {contract['federal_id']} deleted by {session.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Downloads
# =============================================================================

@router.get("/{contract_id}/summary")
async def download_summary(
    contract_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Plain-text contract summary sheet."""
    contract = get_contract_or_404(store, contract_id)
    return _text_download(render_contract_summary(contract), report_filename(contract, "summary"))


@router.get("/{contract_id}/report")
async def download_report(
    contract_id: UUID,
    kind: str = Query("ai_research"),
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
    generator: ReportGenerator = Depends(get_report_generator),
):
    """Research or analysis report for one contract."""
    if kind not in REPORT_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Report kind must be one of: {', '.join(REPORT_KINDS)}",
        )

    contract = get_contract_or_404(store, contract_id)

    try:
        body = generator.generate(contract, kind)
    except ReportGenerationError as e:
        logger.error(f"Report generation failed for {contract['federal_id']}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    return _text_download(body, report_filename(contract, kind))
