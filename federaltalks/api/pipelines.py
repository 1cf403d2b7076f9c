"""
Sales Pipeline API endpoints.

Per-user boards of ordered stages. Moving an entry between stages is the
drag-and-drop operation of the board view.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from federaltalks.api.deps import get_auth_session, get_store
from federaltalks.config import DEFAULT_PIPELINE_STAGES
from federaltalks.schemas.pipeline import (
    PipelineBoardResponse,
    PipelineCreate,
    PipelineEntryCreate,
    PipelineEntryMove,
    PipelineEntryResponse,
    PipelineEntryUpdate,
    PipelineResponse,
)
from federaltalks.services.auth import AuthSession
from federaltalks.services.store import TableStore

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helpers
# =============================================================================

def _with_stages(store: TableStore, pipeline: dict) -> dict:
    stages = store.select("pipeline_stages", filters={"pipeline_id": pipeline["id"]}, order=["order_index"])
    return {**pipeline, "stages": stages}


def get_pipeline_or_404(store: TableStore, pipeline_id: UUID, session: AuthSession) -> dict:
    pipeline = store.select_one("pipelines", {"id": pipeline_id, "user_id": session.user_id})
    if not pipeline:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pipeline not found",
        )
    return pipeline


def get_entry_or_404(store: TableStore, entry_id: UUID, session: AuthSession) -> dict:
    entry = store.select_one("pipeline_entries", {"id": entry_id})
    if not entry or not store.select_one("pipelines", {"id": entry["pipeline_id"], "user_id": session.user_id}):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pipeline entry not found",
        )
    return entry


def _stage_in_pipeline(store: TableStore, stage_id: UUID, pipeline_id: UUID) -> dict:
    stage = store.select_one("pipeline_stages", {"id": stage_id, "pipeline_id": pipeline_id})
    if not stage:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Stage does not belong to this pipeline",
        )
    return stage


def create_pipeline_with_stages(store: TableStore, session: AuthSession, data: PipelineCreate) -> dict:
    """Create a pipeline seeded with the default stages. A user's first pipeline is their default."""
    is_first = store.count("pipelines", {"user_id": session.user_id}) == 0

    [pipeline] = store.insert(
        "pipelines",
        [{
            "user_id": session.user_id,
            "name": data.name,
            "description": data.description,
            "is_default": data.is_default or is_first,
        }],
    )
    if pipeline["is_default"] and not is_first:
        store.update("pipelines", {"is_default": False}, {"user_id": session.user_id, "is_default": True})
        store.update("pipelines", {"is_default": True}, {"id": pipeline["id"]})

    store.insert(
        "pipeline_stages",
        [
            {"pipeline_id": pipeline["id"], "name": name, "order_index": index, "color": color}
            for index, (name, color) in enumerate(DEFAULT_PIPELINE_STAGES)
        ],
    )
    logger.info(f"Created pipeline '{data.name}' for {session.email}")
    return _with_stages(store, store.select_one("pipelines", {"id": pipeline["id"]}))


def _entry_value(entry: dict, contract: dict) -> float:
    if entry.get("estimated_value") is not None:
        return entry["estimated_value"]
    return (contract or {}).get("budget_max") or 0.0


# =============================================================================
# Pipelines
# =============================================================================

@router.get("", response_model=List[PipelineResponse])
async def list_pipelines(
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """List the current user's pipelines with their stages."""
    pipelines = store.select("pipelines", filters={"user_id": session.user_id}, order=["created_at"])
    return [_with_stages(store, p) for p in pipelines]


@router.post("", response_model=PipelineResponse, status_code=status.HTTP_201_CREATED)
async def create_pipeline(
    data: PipelineCreate,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    return create_pipeline_with_stages(store, session, data)


@router.get("/default", response_model=PipelineResponse)
async def get_default_pipeline(
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """The user's default pipeline, created on first access."""
    pipeline = store.select_one("pipelines", {"user_id": session.user_id, "is_default": True})
    if pipeline:
        return _with_stages(store, pipeline)
    return create_pipeline_with_stages(store, session, PipelineCreate(name="My Pipeline", is_default=True))


@router.delete("/{pipeline_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pipeline(
    pipeline_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    get_pipeline_or_404(store, pipeline_id, session)

    store.delete("pipeline_entries", {"pipeline_id": pipeline_id})
    store.delete("pipeline_stages", {"pipeline_id": pipeline_id})
    store.delete("pipelines", {"id": pipeline_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{pipeline_id}/board", response_model=PipelineBoardResponse)
async def get_board(
    pipeline_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Stages in order, each with its entries and total value."""
    pipeline = _with_stages(store, get_pipeline_or_404(store, pipeline_id, session))
    entries = store.select("pipeline_entries", filters={"pipeline_id": pipeline_id}, order=["created_at"])

    contract_ids = list({entry["contract_id"] for entry in entries})
    contracts = {
        c["id"]: c for c in store.select("contracts", filters={"id": contract_ids})
    } if contract_ids else {}

    columns = []
    for stage in pipeline["stages"]:
        stage_entries = [
            {**entry, "contract": contracts.get(entry["contract_id"])}
            for entry in entries
            if entry["stage_id"] == stage["id"]
        ]
        columns.append({
            "stage": stage,
            "entries": stage_entries,
            "total_value": sum(_entry_value(e, e["contract"]) for e in stage_entries),
        })

    return {"pipeline": pipeline, "columns": columns}


# =============================================================================
# Entries
# =============================================================================

@router.post("/{pipeline_id}/entries", response_model=PipelineEntryResponse, status_code=status.HTTP_201_CREATED)
async def add_entry(
    pipeline_id: UUID,
    data: PipelineEntryCreate,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Track a contract on this pipeline."""
    get_pipeline_or_404(store, pipeline_id, session)

    contract = store.select_one("contracts", {"id": data.contract_id})
    if not contract:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contract not found",
        )

    if store.select_one("pipeline_entries", {"pipeline_id": pipeline_id, "contract_id": data.contract_id}):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Contract is already in this pipeline",
        )

    if data.stage_id:
        stage = _stage_in_pipeline(store, data.stage_id, pipeline_id)
    else:
        stages = store.select("pipeline_stages", filters={"pipeline_id": pipeline_id}, order=["order_index"], limit=1)
        if not stages:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Pipeline has no stages",
            )
        stage = stages[0]

    [entry] = store.insert(
        "pipeline_entries",
        [{
            "pipeline_id": pipeline_id,
            "contract_id": data.contract_id,
            "stage_id": stage["id"],
            "assigned_to": data.assigned_to,
            "notes": data.notes,
            "probability": data.probability,
            "estimated_value": data.estimated_value,
        }],
    )
    return {**entry, "contract": contract}


@router.post("/entries/{entry_id}/move", response_model=PipelineEntryResponse)
async def move_entry(
    entry_id: UUID,
    data: PipelineEntryMove,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """Move an entry to another stage of the same pipeline."""
    entry = get_entry_or_404(store, entry_id, session)
    stage = _stage_in_pipeline(store, data.stage_id, entry["pipeline_id"])

    store.update("pipeline_entries", {"stage_id": stage["id"]}, {"id": entry_id})
    logger.info(f"Pipeline entry {entry_id} moved to {stage['name']}")
    return store.select_one("pipeline_entries", {"id": entry_id})


@router.patch("/entries/{entry_id}", response_model=PipelineEntryResponse)
async def update_entry(
    entry_id: UUID,
    data: PipelineEntryUpdate,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    get_entry_or_404(store, entry_id, session)

    patch = data.model_dump(exclude_unset=True)
    if patch:
        store.update("pipeline_entries", patch, {"id": entry_id})
    return store.select_one("pipeline_entries", {"id": entry_id})


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_entry(
    entry_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    get_entry_or_404(store, entry_id, session)
    store.delete("pipeline_entries", {"id": entry_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
