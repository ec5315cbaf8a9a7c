from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from karibu.core.store import Collection, RecordKind, RecordStore
from karibu.dependencies.auth import get_current_user, get_sales_staff
from karibu.dependencies.body import get_json_body
from karibu.dependencies.store import get_store
from karibu.models.base import utcnow
from karibu.models.sale import SaleType
from karibu.models.user import User
from karibu.schemas.responses import listing, single
from karibu.schemas.sale import CashSaleCreate, CreditSaleCreate
from karibu.schemas.validation import validate_payload

router = APIRouter()


# ==========================================
# 1. CASH SALE
# ==========================================

@router.post("/cash", status_code=status.HTTP_201_CREATED)
async def create_cash_sale(
    current_user: User = Depends(get_sales_staff),
    payload: Dict[str, Any] = Depends(get_json_body),
    store: RecordStore = Depends(get_store),
):
    """
    Record a sale paid in full at the counter.

    Access: Sales Agent, Manager
    """
    data = validate_payload(CashSaleCreate, payload)
    sale = await store.create(RecordKind.CASH_SALE, data.normalized(now=utcnow()), current_user)
    return single(sale)


# ==========================================
# 2. CREDIT SALE
# ==========================================

@router.post("/credit", status_code=status.HTTP_201_CREATED)
async def create_credit_sale(
    current_user: User = Depends(get_sales_staff),
    payload: Dict[str, Any] = Depends(get_json_body),
    store: RecordStore = Depends(get_store),
):
    """
    Record a sale on credit. It starts unpaid whatever the body says.
    `dispatchDate` defaults to now; a past `dueDate` is accepted.

    Access: Sales Agent, Manager
    """
    data = validate_payload(CreditSaleCreate, payload)
    sale = await store.create(RecordKind.CREDIT_SALE, data.normalized(now=utcnow()), current_user)
    return single(sale)


# ==========================================
# 3. LIST SALES
# ==========================================

@router.get("")
async def list_sales(
    sale_type: Optional[SaleType] = Query(None, alias="type", description="Filter by sale type"),
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    return listing(await store.find_all(Collection.SALES, sale_type=sale_type))


# ==========================================
# 4. MARK CREDIT SALE PAID
# ==========================================

@router.patch("/credit/{sale_id}/payment")
async def mark_credit_sale_paid(
    sale_id: str,
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Any logged-in user may settle any credit sale.
    Repeating the call keeps it paid and moves paymentDate forward.
    """
    return single(await store.mark_credit_sale_paid(sale_id))
