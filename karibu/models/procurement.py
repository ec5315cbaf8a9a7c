from datetime import datetime
from enum import Enum

from karibu.models.base import RecordBase


class Branch(str, Enum):
    MAGANJO = "Maganjo"
    MATUGGA = "Matugga"


class Procurement(RecordBase):
    """
    Produce bought in from a dealer.
    Cost and selling price are recorded as given; no margin is enforced between them.
    """
    produce_name: str
    produce_type: str
    date: datetime
    time: str
    tonnage: int
    cost: float
    dealer_name: str
    branch: Branch
    contact: str
    selling_price: float
