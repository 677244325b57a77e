"""
Cliente HTTP do backend (REST/JSON).

Endpoints usados:
- GET  /products/with-inventory  → snapshot do catálogo
- GET  /owners                   → clientes (com saldo de crédito)
- POST /sales/validate-stock     → validação de estoque no servidor
- POST /sales                    → criação da venda (uma vez por checkout)

Erros de transporte e respostas não-2xx viram `ErroAPI`, com a mensagem
do campo ``msg`` do backend quando existir. Não há retry: reenviar uma
venda pode cobrar ou baixar estoque em dobro.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import httpx

from vendas.adapters.parsers import (
    cliente_from_json,
    produto_from_json,
    resposta_venda_from_json,
    validacao_from_json,
)
from vendas.config import API_TOKEN, API_URL, DEFAULTS
from vendas.domain.models import (
    Cliente,
    ItemSubmissao,
    ProdutoComInventario,
    RespostaVenda,
    ResultadoValidacaoEstoque,
    VendaSubmissao,
)
from vendas.infra.logger import log_api

_PALAVRAS_ESTOQUE = ("stock", "estoque", "insuficiente", "insufficient")


class ErroAPI(Exception):
    """Falha de rede ou resposta de erro do backend."""

    def __init__(self, mensagem: str, status: Optional[int] = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.status = status

    @property
    def rejeicao_estoque(self) -> bool:
        """O backend recusou por estoque insuficiente (snapshot local desatualizado)."""
        if self.status is None:
            return False
        if self.status == 409:
            return True
        texto = self.mensagem.lower()
        return 400 <= self.status < 500 and any(p in texto for p in _PALAVRAS_ESTOQUE)


class BackendAPI:
    def __init__(
        self,
        base_url: str = API_URL,
        token: Optional[str] = API_TOKEN,
        timeout: float = DEFAULTS.timeout_segundos,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url, headers=headers, timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "BackendAPI":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, padrao_erro: str, exigir_json: bool = True, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            log_api(method, path, error=str(e))
            raise ErroAPI(f"{padrao_erro}: {e}") from e

        if response.is_error:
            mensagem = padrao_erro
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("msg"):
                    mensagem = str(body["msg"])
            except ValueError:
                pass
            log_api(method, path, status=response.status_code, error=mensagem)
            raise ErroAPI(mensagem, status=response.status_code)

        log_api(method, path, status=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            if not exigir_json:
                log_api(method, path, status=response.status_code, error="corpo não é JSON")
                return None
            raise ErroAPI(f"{padrao_erro}: resposta inválida", status=response.status_code) from e

    def listar_produtos_com_inventario(self) -> List[ProdutoComInventario]:
        data = self._request("GET", "/products/with-inventory", "Erro ao obter produtos")
        if isinstance(data, dict):
            data = data.get("products", [])
        try:
            return [produto_from_json(p) for p in data]
        except (TypeError, ValueError) as e:
            raise ErroAPI(f"Dados de produtos inválidos: {e}") from e

    def listar_clientes(self) -> List[Cliente]:
        data = self._request("GET", "/owners", "Erro ao obter os clientes")
        if isinstance(data, dict):
            data = data.get("owners", [])
        return [cliente_from_json(o) for o in data]

    def validar_estoque(self, itens: Iterable[ItemSubmissao]) -> List[ResultadoValidacaoEstoque]:
        payload = {
            "items": [
                {"productId": it.produto_id, "quantity": float(it.quantidade), "isFullUnit": it.unidade_completa}
                for it in itens
            ]
        }
        data = self._request("POST", "/sales/validate-stock", "Erro ao validar stock", json=payload)
        if not isinstance(data, dict):
            raise ErroAPI("Erro ao validar stock: resposta inválida")
        try:
            return [validacao_from_json(r) for r in data.get("items", [])]
        except (AttributeError, TypeError, ValueError) as e:
            raise ErroAPI(f"Erro ao validar stock: resposta inválida ({e})") from e

    def criar_venda(self, submissao: VendaSubmissao) -> RespostaVenda:
        """Envia a venda. Qualquer 2xx significa venda registrada no backend.

        Um corpo de sucesso ilegível não vira erro: a venda já foi gravada e
        tratá-la como falha levaria o operador a reenviá-la.
        """
        data = self._request(
            "POST", "/sales", "Erro ao criar a venda", exigir_json=False, json=submissao.para_payload()
        )
        try:
            return resposta_venda_from_json(data)
        except (AttributeError, TypeError, ValueError) as e:
            log_api("POST", "/sales", error=f"resposta de sucesso ilegível: {e}")
            return RespostaVenda(venda_id="", bruto=data if isinstance(data, dict) else {})
