"""
api_service package

Backend for the detection platform's HTTP API:

- FastAPI application (`main.py`) and uvicorn entry point (`server.py`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Credential authority and auth delegation (`identity.py`, `services.py`)
- Pydantic request/response schemas (`schemas.py`)
"""
