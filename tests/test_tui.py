import io

import httpx
from rich.console import Console

from vendas.adapters import tui as tui_mod
from vendas.adapters.api import BackendAPI
from vendas.adapters.tui import PontoVendaTUI


def _tui():
    api = BackendAPI(
        base_url="http://backend.test/api",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
    )
    saida = io.StringIO()
    return PontoVendaTUI(api, console=Console(file=saida, width=120)), saida


def test_finalizar_sem_cliente_nao_pede_pagamento(monkeypatch):
    tui, saida = _tui()

    def _nao_deve_pedir():
        raise AssertionError("pagamento pedido antes das pré-condições")

    monkeypatch.setattr(tui, "_pedir_pagamento", _nao_deve_pedir)
    monkeypatch.setattr(tui_mod.Confirm, "ask", lambda *a, **kw: True)
    tui.finalizar()
    assert "Selecione um cliente" in saida.getvalue()
