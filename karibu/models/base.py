from datetime import datetime, timezone
from typing import Union
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Python attributes in snake_case, documents and JSON in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class UserSummary(CamelModel):
    """The slice of a User that is joined onto transaction records at read time."""
    id: str
    name: str
    email: str


class RecordBase(CamelModel):
    id: str
    # A bare user id as stored, or the joined summary when read back
    recorded_by: Union[UserSummary, str]
    created_at: datetime
