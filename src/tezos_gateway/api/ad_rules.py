"""Ad providers rules: thin CRUD over the key-value store."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tezos_gateway.api.deps import Services, get_services, require_admin
from tezos_gateway.storage.objects import StoredValueNotFound

CACHE_CONTROL = {"Cache-Control": "public, max-age=300"}

router = APIRouter(prefix="/api/slise-ad-rules/providers", tags=["Ad providers"])


class SelectorWithDepth(BaseModel):
    selector: str
    parent_depth: int = Field(alias="parentDepth", ge=0)


AdProviderSelector = str | SelectorWithDepth


# --- providers replaced at all sites ---


@router.get("/all-sites")
async def get_all_sites_providers(services: Services = Depends(get_services)):
    return await services.ad_providers_all_sites.get_all()


@router.post("/all-sites", dependencies=[Depends(require_admin)])
async def add_all_sites_providers(
    providers: list[str] = Body(...),
    services: Services = Depends(get_services),
):
    await services.ad_providers_all_sites.add(providers)
    return {"message": "Providers have been added successfully"}


@router.delete("/all-sites", dependencies=[Depends(require_admin)])
async def remove_all_sites_providers(
    providers: list[str] = Body(...),
    services: Services = Depends(get_services),
):
    removed = await services.ad_providers_all_sites.remove(providers)
    return {"message": f"{removed} providers have been removed"}


# --- selectors by provider ---


@router.get("/raw/all")
async def get_raw_providers(services: Services = Depends(get_services)):
    return await services.ad_providers.get_all_values()


@router.get("/{provider}/raw")
async def get_raw_provider(provider: str, services: Services = Depends(get_services)):
    value = await _get_provider(services, provider)
    return JSONResponse(content=value, headers=CACHE_CONTROL)


@router.get("/{provider}")
async def get_provider(provider: str, services: Services = Depends(get_services)):
    return await _get_provider(services, provider)


@router.get("")
async def get_providers(services: Services = Depends(get_services)):
    values = await services.ad_providers.get_all_values()
    return JSONResponse(content=values, headers=CACHE_CONTROL)


@router.post("", dependencies=[Depends(require_admin)])
async def upsert_providers(
    providers: dict[str, list[AdProviderSelector]] = Body(...),
    services: Services = Depends(get_services),
):
    await services.ad_providers.upsert_values({
        name: [s if isinstance(s, str) else s.model_dump(by_alias=True) for s in selectors]
        for name, selectors in providers.items()
    })
    return {"message": "Values have been added successfully"}


@router.delete("", dependencies=[Depends(require_admin)])
async def remove_providers(
    providers: list[str] = Body(...),
    services: Services = Depends(get_services),
):
    removed = await services.ad_providers.remove_values(providers)
    return {"message": f"{removed} providers have been removed"}


async def _get_provider(services: Services, provider: str):
    try:
        return await services.ad_providers.get_by_key(provider)
    except StoredValueNotFound:
        raise HTTPException(status_code=404, detail=f"Provider {provider!r} not found")
