from typing import Any, Dict, Iterable

from pydantic import BaseModel


def to_json(record: BaseModel) -> Dict[str, Any]:
    return record.model_dump(by_alias=True, mode="json")


def single(record: BaseModel) -> Dict[str, Any]:
    """Envelope for create and read-one endpoints."""
    return {"success": True, "data": to_json(record)}


def listing(records: Iterable[BaseModel]) -> Dict[str, Any]:
    data = [to_json(r) for r in records]
    return {"success": True, "count": len(data), "data": data}
