"""
High-level use cases for the home service.

Each service module orchestrates repositories to implement business rules.
Routers (FastAPI endpoints) call these services instead of touching the
database session directly.
"""
