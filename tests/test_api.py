import json

import httpx
import pytest

from vendas.adapters.api import BackendAPI, ErroAPI
from vendas.domain.models import ItemSubmissao


def _api(handler):
    return BackendAPI(base_url="http://backend.test/api", token="tok", transport=httpx.MockTransport(handler))


def test_lista_produtos_e_envia_token():
    vistos = {}

    def handler(request: httpx.Request):
        vistos["auth"] = request.headers.get("Authorization")
        vistos["path"] = request.url.path
        return httpx.Response(200, json=[{"_id": "p1", "name": "Shampoo", "salePrice": 7.5,
                                          "inventory": {"stockUnits": 3, "stockDoses": 0}}])

    with _api(handler) as api:
        produtos = api.listar_produtos_com_inventario()
    assert vistos == {"auth": "Bearer tok", "path": "/api/products/with-inventory"}
    assert [p.id for p in produtos] == ["p1"]


def test_erro_http_usa_msg_do_backend():
    def handler(request):
        return httpx.Response(500, json={"msg": "Falla interna"})

    with _api(handler) as api:
        with pytest.raises(ErroAPI) as exc:
            api.listar_produtos_com_inventario()
    assert exc.value.mensagem == "Falla interna"
    assert exc.value.status == 500
    assert not exc.value.rejeicao_estoque


def test_erro_de_rede():
    def handler(request):
        raise httpx.ConnectError("conexão recusada", request=request)

    with _api(handler) as api:
        with pytest.raises(ErroAPI) as exc:
            api.listar_produtos_com_inventario()
    assert exc.value.status is None
    assert not exc.value.rejeicao_estoque


@pytest.mark.parametrize(
    "status,msg,esperado",
    [
        (409, "Conflito", True),
        (400, "Stock insuficiente para Meloxicam", True),
        (400, "Datos inválidos", False),
        (503, "stock service down", False),
    ],
)
def test_rejeicao_de_estoque(status, msg, esperado):
    assert ErroAPI(msg, status).rejeicao_estoque is esperado


def test_validar_estoque():
    def handler(request):
        body = json.loads(request.content)
        assert body == {"items": [{"productId": "p1", "quantity": 2.5, "isFullUnit": False}]}
        return httpx.Response(200, json={"valid": True, "items": [
            {"productId": "p1", "valid": True, "available": 12, "requested": 2.5}
        ]})

    with _api(handler) as api:
        res = api.validar_estoque([ItemSubmissao("p1", 2.5, False)])
    assert res[0].valido


def _submissao():
    from vendas.domain.carrinho import Carrinho
    from vendas.domain.checkout import montar_submissao
    from vendas.domain.models import Cliente, Inventario, Produto

    c = Carrinho()
    c.adicionar_linha(Produto(id="VAC", nome="Vacuna", preco_venda=25), Inventario(unidades=3), True)
    return montar_submissao(c, Cliente(id="OW1", nome="Ana")).valor


@pytest.mark.parametrize(
    "resposta",
    [
        httpx.Response(201, json={"changeAmount": "n/a"}),
        httpx.Response(201, json=["ok"]),
        httpx.Response(201, text="Created"),
    ],
)
def test_criar_venda_com_corpo_de_sucesso_ilegivel_ainda_e_sucesso(resposta):
    with _api(lambda request: resposta) as api:
        r = api.criar_venda(_submissao())
    assert r.venda_id == ""
    assert r.troco == 0


def test_validar_estoque_com_resposta_em_lista_vira_erro_api():
    with _api(lambda request: httpx.Response(200, json=[{"productId": "p1"}])) as api:
        with pytest.raises(ErroAPI):
            api.validar_estoque([ItemSubmissao("p1", 1, True)])
