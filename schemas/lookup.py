from typing import Optional

from pydantic import BaseModel


class RegistryRecord(BaseModel):
    cnpj: str
    name: str
    razao_social: str = ""
    nome_fantasia: str = ""
    cep: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""


class PostalAddress(BaseModel):
    cep: str
    street: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""


class GeocodeResult(BaseModel):
    lat: float
    lng: float
    display_name: Optional[str] = None
