from fastapi import FastAPI

from . import events, health, workspaces

ROUTERS = (health.router, events.router, workspaces.router)


def register_routes(app: FastAPI) -> None:
    """Mount the probe and the event and workspace report routers."""
    for router in ROUTERS:
        app.include_router(router)
