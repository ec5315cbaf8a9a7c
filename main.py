# Entry point: uvicorn main:app
from karibu.main import create_app

app = create_app()
