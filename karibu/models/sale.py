from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from karibu.models.base import RecordBase


class SaleType(str, Enum):
    CASH = "Cash"
    CREDIT = "Credit"


class CashSale(RecordBase):
    """Fully paid at the counter. Never changes after creation."""
    sale_type: Literal["Cash"] = "Cash"
    produce_name: str
    tonnage: int
    amount_paid: float
    buyer_name: str
    sales_agent_name: str
    date: datetime
    time: str


class CreditSale(RecordBase):
    """
    Deferred payment. Starts unpaid; the payment endpoint flips `is_paid`
    and stamps `payment_date`. There is no way back to unpaid.
    """
    sale_type: Literal["Credit"] = "Credit"
    buyer_name: str
    national_id: str
    location: str
    contacts: str
    amount_due: float
    sales_agent_name: str
    due_date: datetime
    produce_name: str
    produce_type: str
    tonnage: int
    dispatch_date: datetime
    is_paid: bool = False
    payment_date: Optional[datetime] = None


# Both variants share one identity space, told apart by `saleType`
Sale = Annotated[Union[CashSale, CreditSale], Field(discriminator="sale_type")]

sale_adapter: TypeAdapter = TypeAdapter(Sale)
