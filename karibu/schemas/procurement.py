from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from karibu.models.procurement import Branch
from karibu.schemas.validation import (
    ALPHANUMERIC,
    LETTERS,
    PHONE,
    TIME_24H,
    RecordInput,
    number_as_text,
    parse_iso_date,
    reject_bool,
)


class ProcurementCreate(RecordInput):
    """Body of POST /procurement (Managers only)."""
    produce_name: str = Field(pattern=ALPHANUMERIC)
    produce_type: str = Field(min_length=2, pattern=LETTERS)
    date: Optional[datetime] = None
    time: str = Field(pattern=TIME_24H)
    tonnage: int = Field(ge=100)
    cost: float = Field(ge=10000)
    dealer_name: str = Field(min_length=2, pattern=ALPHANUMERIC)
    branch: Branch
    contact: str = Field(pattern=PHONE)
    selling_price: float = Field(ge=1000)

    labels = {"contact": "Contact number"}
    messages = {
        "produceName.string_pattern_mismatch": "Produce name must be alphanumeric",
        "produceType.string_pattern_mismatch": "Produce type must contain only letters",
        "time.string_pattern_mismatch": "Please enter a valid time (HH:MM)",
        "tonnage.greater_than_equal": "Tonnage must be at least 100 kg",
        "cost.greater_than_equal": "Cost must be at least 10,000 UgX",
        "dealerName.string_pattern_mismatch": "Dealer name must be alphanumeric",
        "branch.enum": "Branch must be either Maganjo or Matugga",
        "contact.string_pattern_mismatch": "Please enter a valid phone number",
        "sellingPrice.greater_than_equal": "Selling price must be at least 1,000 UgX",
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

    @field_validator("contact", mode="before")
    @classmethod
    def contact_as_text(cls, v: Any):
        return number_as_text(v)
