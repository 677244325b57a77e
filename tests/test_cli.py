import json

import httpx
import pytest
from typer.testing import CliRunner

from vendas.adapters import cli
from vendas.adapters.api import BackendAPI
from vendas.adapters.cli import app

runner = CliRunner()

PRODUTOS = [
    {"_id": "VAC", "name": "Vacuna", "category": "vacuna", "unit": "frasco",
     "salePrice": 25, "inventory": {"stockUnits": 4, "stockDoses": 0}},
    {"_id": "SHA", "name": "Shampoo", "category": "higiene", "unit": "botella",
     "salePrice": 7.5, "inventory": {"stockUnits": 2, "stockDoses": 0}},
]


def _usar_backend(monkeypatch, handler):
    monkeypatch.setattr(
        cli, "_api_factory",
        lambda base_url: BackendAPI(base_url="http://backend.test/api", transport=httpx.MockTransport(handler)),
    )


def test_cli_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["moeda"] == "USD"
    assert "api_url" in data
    assert "timeout_segundos" in data


def test_cli_catalogo_com_busca(monkeypatch):
    _usar_backend(monkeypatch, lambda request: httpx.Response(200, json=PRODUTOS))
    result = runner.invoke(app, ["catalogo", "--busca", "higiene"])
    assert result.exit_code == 0, result.output
    assert "Shampoo" in result.stdout
    assert "Vacuna" not in result.stdout


def test_cli_catalogo_backend_fora(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("recusado", request=request)

    _usar_backend(monkeypatch, handler)
    result = runner.invoke(app, ["catalogo"])
    assert result.exit_code == 1


@pytest.mark.parametrize("valido,codigo", [(True, 0), (False, 2)])
def test_cli_validar_estoque(monkeypatch, valido, codigo):
    recebido = {}

    def handler(request):
        recebido.update(json.loads(request.content))
        return httpx.Response(200, json={"items": [
            {"productId": "MEL", "valid": valido, "available": 12, "requested": 2.5}
        ]})

    _usar_backend(monkeypatch, handler)
    result = runner.invoke(app, ["validar-estoque", "MEL", "2,5", "--dose"])
    assert result.exit_code == codigo, result.output
    assert recebido["items"] == [{"productId": "MEL", "quantity": 2.5, "isFullUnit": False}]


def test_cli_validar_estoque_quantidade_invalida():
    result = runner.invoke(app, ["validar-estoque", "MEL", "abc"])
    assert result.exit_code == 1
    assert "inválida" in result.stdout
