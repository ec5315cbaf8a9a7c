from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from karibu.schemas.validation import (
    ALPHANUMERIC,
    NATIONAL_ID,
    PHONE,
    TIME_24H,
    RecordInput,
    number_as_text,
    parse_iso_date,
    reject_bool,
)


# ==========================================
# REQUEST SCHEMAS (What sales agents send)
# ==========================================

class CashSaleCreate(RecordInput):
    """Body of POST /sales/cash"""
    produce_name: str = Field(min_length=1)
    tonnage: int = Field(ge=1)
    amount_paid: float = Field(ge=10000)
    buyer_name: str = Field(min_length=2, pattern=ALPHANUMERIC)
    sales_agent_name: str = Field(min_length=2, pattern=ALPHANUMERIC)
    date: Optional[datetime] = None
    time: str = Field(pattern=TIME_24H)

    messages = {
        "produceName.string_too_short": "Produce name is required",
        "tonnage.greater_than_equal": "Tonnage must be at least 1 kg",
        "amountPaid.greater_than_equal": "Amount paid must be at least 10,000 UgX",
        "buyerName.string_pattern_mismatch": "Buyer name must be alphanumeric",
        "salesAgentName.string_pattern_mismatch": "Sales agent name must be alphanumeric",
        "time.string_pattern_mismatch": "Please enter a valid time (HH:MM)",
    }
    default_now = ("date",)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any):
        if v is None:
            return None
        return parse_iso_date(v, "Please enter a valid date")

    @field_validator("tonnage", mode="before")
    @classmethod
    def tonnage_not_bool(cls, v: Any):
        return reject_bool(v, "Tonnage must be a whole number")


class CreditSaleCreate(RecordInput):
    """
    Body of POST /sales/credit.
    isPaid / paymentDate are not accepted here: every credit sale starts unpaid.
    """
    buyer_name: str = Field(min_length=2, pattern=ALPHANUMERIC)
    national_id: str = Field(pattern=NATIONAL_ID)
    location: str = Field(min_length=2, pattern=ALPHANUMERIC)
    contacts: str = Field(pattern=PHONE)
    amount_due: float = Field(ge=10000)
    sales_agent_name: str = Field(min_length=2, pattern=ALPHANUMERIC)
    due_date: datetime
    produce_name: str = Field(min_length=1)
    produce_type: str = Field(min_length=1)
    tonnage: int = Field(ge=1)
    dispatch_date: Optional[datetime] = None

    labels = {"nationalId": "National ID", "contacts": "Contact number"}
    messages = {
        "buyerName.string_pattern_mismatch": "Buyer name must be alphanumeric",
        "nationalId.string_pattern_mismatch": "Please enter a valid NIN",
        "location.string_pattern_mismatch": "Location must be alphanumeric",
        "contacts.string_pattern_mismatch": "Please enter a valid phone number",
        "amountDue.greater_than_equal": "Amount due must be at least 10,000 UgX",
        "salesAgentName.string_pattern_mismatch": "Sales agent name must be alphanumeric",
        "produceName.string_too_short": "Produce name is required",
        "produceType.string_too_short": "Produce type is required",
        "tonnage.greater_than_equal": "Tonnage must be at least 1 kg",
    }
    default_now = ("dispatch_date",)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any):
        # Past due dates are accepted
        return parse_iso_date(v, "Please enter a valid due date")

    @field_validator("dispatch_date", mode="before")
    @classmethod
    def parse_dispatch_date(cls, v: Any):
        if v is None:
            return None
        return parse_iso_date(v, "Please enter a valid dispatch date")

    @field_validator("tonnage", mode="before")
    @classmethod
    def tonnage_not_bool(cls, v: Any):
        return reject_bool(v, "Tonnage must be a whole number")

    @field_validator("contacts", mode="before")
    @classmethod
    def contacts_as_text(cls, v: Any):
        return number_as_text(v)
