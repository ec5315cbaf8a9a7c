from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from karibu.core.store import Collection, RecordKind, RecordStore
from karibu.dependencies.auth import get_current_user, get_manager
from karibu.dependencies.body import get_json_body
from karibu.dependencies.store import get_store
from karibu.models.base import utcnow
from karibu.models.user import User
from karibu.schemas.procurement import ProcurementCreate
from karibu.schemas.responses import listing, single
from karibu.schemas.validation import validate_payload

router = APIRouter(prefix="/procurement", tags=["Procurement"])


# ==========================================
# 1. RECORD PROCUREMENT
# ==========================================
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_procurement(
    current_user: User = Depends(get_manager),
    payload: Dict[str, Any] = Depends(get_json_body),
    store: RecordStore = Depends(get_store),
):
    """
    Record produce bought from a dealer.
    Only Managers can record procurement.

    - `date` defaults to now when omitted
    - selling price is not checked against cost
    """
    data = validate_payload(ProcurementCreate, payload)
    procurement = await store.create(RecordKind.PROCUREMENT, data.normalized(now=utcnow()), current_user)
    return single(procurement)


# ==========================================
# 2. LIST PROCUREMENT (newest first)
# ==========================================
@router.get("")
async def list_procurements(
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    return listing(await store.find_all(Collection.PROCUREMENTS))


# ==========================================
# 3. SINGLE PROCUREMENT RECORD
# ==========================================
@router.get("/{procurement_id}")
async def get_procurement(
    procurement_id: str,
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    return single(await store.find_by_id(Collection.PROCUREMENTS, procurement_id))
