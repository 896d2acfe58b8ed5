"""
FastAPI routers grouped by domain (users, health, metrics).

Each file inside this package exposes an APIRouter that the app factory
includes, keeping endpoint definitions close to their use cases.
"""
