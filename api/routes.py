"""
Hub API routes: page load, login, per-provider connect and management.

Route prefix: /hub

Every route is scoped to the calling browser (see ``api/dependencies.py``)
and answers with the composed HubView so a thin frontend can
render whatever screen the state machine is in.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import OperatorSession, get_hub, get_operator
from connectors.registry import ProviderRegistry
from core.navigation import PageNavigator
from core.orchestrator import ConnectHub
from core.provider_connection import ProviderConnection
from utils.errors import UnknownProvider
from utils.schemas import HubView, LoginCredentials

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hub"])


def _provider(hub: ConnectHub, provider: str) -> ProviderConnection:
    try:
        return hub.connection(provider)
    except UnknownProvider as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)


# ── Page ───────────────────────────────────────────────────────────────


@router.get("", response_model=HubView)
async def load_page(
    request: Request,
    operator: OperatorSession = Depends(get_operator),
) -> HubView:
    """
    A fresh page load.

    Pass the provider redirect through unchanged (``?code=…&provider=…`` or
    ``?error=…``); the returned ``location`` is the cleaned URL to show.
    """
    hub = ConnectHub(operator.client, PageNavigator(str(request.url)))
    operator.hub = hub
    await hub.on_load()
    return hub.view()


@router.get("/view", response_model=HubView)
async def current_view(hub: ConnectHub = Depends(get_hub)) -> HubView:
    return hub.view()


@router.get("/providers")
async def list_providers() -> list[dict]:
    """All known providers and whether they are enabled."""
    registry = ProviderRegistry()
    registry.discover()
    return registry.list_providers()


@router.post("/login", response_model=HubView)
async def login(req: LoginCredentials, hub: ConnectHub = Depends(get_hub)) -> HubView:
    await hub.login(req)
    return hub.view()


# ── Provider actions ───────────────────────────────────────────────────


@router.post("/providers/{provider}/connect", response_model=HubView)
async def begin_connect(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    """Start OAuth; on success ``navigate_to`` holds the provider URL."""
    _provider(hub, provider)
    await hub.begin_connect(provider)
    return hub.view()


@router.post("/providers/{provider}/manage", response_model=HubView)
async def open_manage(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    await hub.open_manage(provider)
    return hub.view()


@router.post("/providers/{provider}/sync", response_model=HubView)
async def resync(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    await hub.sync(provider)
    return hub.view()


@router.post("/providers/{provider}/accounts/{account_id}/toggle", response_model=HubView)
async def toggle_account(provider: str, account_id: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    hub.toggle(provider, account_id)
    return hub.view()


@router.post("/providers/{provider}/save", response_model=HubView)
async def save_selection(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    await hub.save(provider)
    return hub.view()


@router.post("/providers/{provider}/back", response_model=HubView)
async def back(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    hub.back(provider)
    return hub.view()


@router.delete("/providers/{provider}", response_model=HubView)
async def disconnect(provider: str, hub: ConnectHub = Depends(get_hub)) -> HubView:
    _provider(hub, provider)
    await hub.disconnect(provider)
    return hub.view()
