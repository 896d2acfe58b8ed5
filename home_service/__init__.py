"""template-home-service: a User CRUD microservice on FastAPI + SQLAlchemy."""

__version__ = "0.1.0"
