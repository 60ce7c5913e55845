from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.deps import get_map_view
from partnerhub.geocoding import geocode
from partnerhub.registry_lookup import lookup_cep, lookup_cnpj
from partnerhub.storage import MapViewStore
from schemas.lookup import GeocodeResult, PostalAddress, RegistryRecord

router = APIRouter(tags=["lookups"])


class MapView(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    zoom: float = Field(ge=0, le=22)


@router.get("/lookups/cnpj/{cnpj}", response_model=RegistryRecord)
async def cnpj_lookup(cnpj: str):
    record = await lookup_cnpj(cnpj)
    if record is None:
        raise HTTPException(status_code=404, detail="CNPJ não encontrado ou erro na consulta.")
    return record


@router.get("/lookups/cep/{cep}", response_model=PostalAddress)
async def cep_lookup(cep: str):
    address = await lookup_cep(cep)
    if address is None:
        raise HTTPException(status_code=404, detail="CEP não encontrado.")
    return address


@router.get("/lookups/geocode", response_model=GeocodeResult)
async def geocode_lookup(q: str):
    found = await geocode(q)
    if found is None:
        raise HTTPException(status_code=404, detail="Local não encontrado.")
    return found


@router.get("/map-view", response_model=MapView)
async def get_view(views: MapViewStore = Depends(get_map_view)):
    return views.get()


@router.put("/map-view", response_model=MapView)
async def save_view(body: MapView, views: MapViewStore = Depends(get_map_view)):
    return views.save(body.lat, body.lng, body.zoom)


@router.delete("/map-view", response_model=MapView)
async def reset_view(views: MapViewStore = Depends(get_map_view)):
    return views.reset()
