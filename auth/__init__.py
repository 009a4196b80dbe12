"""auth/ -- Credential store and session issuing for the car catalog.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or catalog/. auth/dependencies.py may import
fastapi because it is part of the FastAPI dependency injection system.
api/ imports from auth/, not the other way around.
"""
