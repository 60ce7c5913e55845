import httpx
import pytest

from partnerhub import geocoding, registry_lookup


class FakeResp:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                "boom", request=httpx.Request("GET", "http://x"), response=httpx.Response(self.status_code)
            )

    def json(self):
        return self._payload


def _fake_client(payload, status_code=200, calls=None):
    class FakeClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, params=None, headers=None):
            if calls is not None:
                calls.append((url, params))
            return FakeResp(payload, status_code)

    return FakeClient


@pytest.mark.asyncio
async def test_cnpj_lookup_combines_trade_and_legal_name(monkeypatch):
    calls = []
    payload = {
        "razao_social": "HORIZONTE EMPREENDIMENTOS LTDA",
        "nome_fantasia": "Horizonte Imóveis",
        "cep": "01310100",
        "ddd_telefone_1": "1133334444",
        "email": "contato@horizonte.com",
        "logradouro": "AV PAULISTA",
        "numero": "1000",
        "bairro": "BELA VISTA",
        "municipio": "SAO PAULO",
        "uf": "SP",
    }
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client(payload, calls=calls))
    record = await registry_lookup.lookup_cnpj("12.345.678/0001-99")
    assert calls[0][0].endswith("/12345678000199")
    assert record.name == "Horizonte Imóveis (HORIZONTE EMPREENDIMENTOS LTDA)"
    assert record.cep == "01310-100"
    assert record.phone == "(11) 3333-4444"
    assert record.city == "SAO PAULO"


def test_display_name_without_trade_name():
    assert registry_lookup.display_name("ALFA LTDA", "") == "ALFA LTDA"
    assert registry_lookup.display_name("ALFA LTDA", "ALFA LTDA") == "ALFA LTDA"


@pytest.mark.asyncio
async def test_cnpj_not_found_returns_none(monkeypatch):
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client({"message": "not found"}, 404))
    assert await registry_lookup.lookup_cnpj("12345678000199") is None


@pytest.mark.asyncio
async def test_cnpj_server_error_returns_none(monkeypatch):
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client({}, 500))
    assert await registry_lookup.lookup_cnpj("12345678000199") is None


@pytest.mark.asyncio
async def test_short_cnpj_skips_the_call(monkeypatch):
    calls = []
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client({}, calls=calls))
    assert await registry_lookup.lookup_cnpj("123") is None
    assert calls == []


@pytest.mark.asyncio
async def test_cep_lookup(monkeypatch):
    payload = {"logradouro": "Avenida Paulista", "bairro": "Bela Vista", "localidade": "São Paulo", "uf": "SP"}
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client(payload))
    address = await registry_lookup.lookup_cep("01310-100")
    assert address.cep == "01310-100"
    assert address.street == "Avenida Paulista"
    assert address.city == "São Paulo"


@pytest.mark.asyncio
async def test_cep_erro_flag_means_not_found(monkeypatch):
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client({"erro": True}))
    assert await registry_lookup.lookup_cep("99999999") is None


@pytest.mark.asyncio
async def test_geocode_first_match(monkeypatch):
    calls = []
    payload = [{"lat": "-25.4284", "lon": "-49.2733", "display_name": "Curitiba, Paraná"}]
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client(payload, calls=calls))
    found = await geocoding.geocode("Curitiba")
    assert (found.lat, found.lng) == (-25.4284, -49.2733)
    assert calls[0][1]["q"] == "Curitiba"


@pytest.mark.asyncio
async def test_geocode_miss(monkeypatch):
    monkeypatch.setattr(registry_lookup.httpx, "AsyncClient", _fake_client([]))
    assert await geocoding.geocode("Lugar Nenhum") is None
    assert await geocoding.geocode("  ") is None
