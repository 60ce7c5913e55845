import types

import pytest

from partnerhub.errors import SearchFailed
from partnerhub.oracle_client import OracleClient
from partnerhub.prospecting import GeoPoint, Grounding


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return self.response


def _client(models):
    return types.SimpleNamespace(aio=types.SimpleNamespace(models=models))


def _response(text, chunks):
    metadata = types.SimpleNamespace(grounding_chunks=chunks)
    return types.SimpleNamespace(text=text, candidates=[types.SimpleNamespace(grounding_metadata=metadata)])


@pytest.mark.asyncio
async def test_maps_grounding_with_location_bias():
    chunks = [
        types.SimpleNamespace(maps=types.SimpleNamespace(title="Alfa Imóveis", uri="https://maps.google.com/?cid=1"), web=None),
        types.SimpleNamespace(maps=None, web=types.SimpleNamespace(title="alfa.com.br", uri="https://alfa.com.br")),
        types.SimpleNamespace(maps=None, web=None),
    ]
    models = FakeModels(_response("Alfa Imóveis | Rua A, 1", chunks))
    oracle = OracleClient(api_key="k", model="gemini-test", client=_client(models))

    result = await oracle.generate("prompt", Grounding.MAPS, GeoPoint(-23.5, -46.6))

    assert result.raw_text == "Alfa Imóveis | Rua A, 1"
    assert [(c.kind, c.title) for c in result.citations] == [
        (Grounding.MAPS, "Alfa Imóveis"),
        (Grounding.WEB, "alfa.com.br"),
    ]
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    config = call["config"]
    assert config.tools[0].google_maps is not None
    assert config.tool_config.retrieval_config.lat_lng.latitude == -23.5


@pytest.mark.asyncio
async def test_web_grounding_without_location():
    models = FakeModels(_response("", []))
    oracle = OracleClient(api_key="k", client=_client(models))
    result = await oracle.generate("prompt", Grounding.WEB)
    assert result.raw_text == ""
    assert result.citations == ()
    config = models.calls[0]["config"]
    assert config.tools[0].google_search is not None
    assert config.tool_config is None


@pytest.mark.asyncio
async def test_missing_text_and_candidates_is_empty_result():
    models = FakeModels(types.SimpleNamespace(text=None, candidates=None))
    result = await OracleClient(api_key="k", client=_client(models)).generate("p", Grounding.WEB)
    assert result.raw_text == "" and result.citations == ()


@pytest.mark.asyncio
async def test_transport_error_becomes_search_failed():
    models = FakeModels(error=RuntimeError("quota exceeded"))
    oracle = OracleClient(api_key="k", client=_client(models))
    with pytest.raises(SearchFailed):
        await oracle.generate("prompt", Grounding.MAPS)
