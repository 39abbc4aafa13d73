# routes.py
from fastapi import FastAPI
from controller.entry_controller import entry_router
from controller.relay_controller import relay_router
from controller.tenant_controller import tenant_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(relay_router)
    app.include_router(tenant_router)
    app.include_router(entry_router)
