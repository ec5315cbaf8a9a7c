from fastapi import Request

from karibu.core.store import RecordStore


def get_store(request: Request) -> RecordStore:
    """The RecordStore owned by this application instance."""
    return request.app.state.store
