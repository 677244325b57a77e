"""
Utilidades de parsing: entrada do usuário e JSON do backend.

Converte números digitados (com vírgula ou ponto como separador decimal,
por exemplo "2,5 ml") e os objetos JSON do backend (campos em camelCase)
para os modelos do domínio.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, Optional

from vendas.domain.dinheiro import ZERO, para_decimal
from vendas.domain.models import (
    Cliente,
    Inventario,
    Produto,
    ProdutoComInventario,
    RespostaVenda,
    ResultadoValidacaoEstoque,
)

_NUM_RE = re.compile(r"[-+]?\d+(?:[.,]\d+)?")


def parse_numero(txt: Any) -> Optional[Decimal]:
    """Extrai o primeiro número de um texto.

    Exemplos:
        "5"        → Decimal("5")
        "2,5 ml"   → Decimal("2.5")
        "$ 10.00"  → Decimal("10.00")
        "abc" / "" / None → None
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float, Decimal)) and not isinstance(txt, bool):
        return para_decimal(txt)
    s = str(txt).strip()
    if not s:
        return None
    m = _NUM_RE.search(s)
    if not m:
        return None
    return para_decimal(m.group(0).replace(",", "."))


def _dec(val: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    if val is None or val == "":
        return default
    return para_decimal(val)


def _id(d: Dict[str, Any]) -> str:
    val = d.get("_id", d.get("id"))
    if val is None:
        raise ValueError(f"objeto sem identificador: {d!r}")
    return str(val)


def produto_from_json(d: Dict[str, Any]) -> ProdutoComInventario:
    """Converte um item de ``GET /products/with-inventory``."""
    produto = Produto(
        id=_id(d),
        nome=str(d.get("name") or "").strip() or _id(d),
        categoria=str(d.get("category") or "otro"),
        unidade=str(d.get("unit") or "unidad"),
        unidade_dose=str(d.get("doseUnit") or "dosis"),
        doses_por_unidade=_dec(d.get("dosesPerUnit"), Decimal("1")),
        divisivel=bool(d.get("divisible", False)),
        preco_venda=_dec(d.get("salePrice")),
        preco_por_dose=_dec(d.get("salePricePerDose"), None),
    )
    inv = d.get("inventory")
    inventario = None
    if isinstance(inv, dict):
        inventario = Inventario(
            unidades=_dec(inv.get("stockUnits")),
            doses=_dec(inv.get("stockDoses")),
        )
    return ProdutoComInventario(produto, inventario)


def cliente_from_json(d: Dict[str, Any]) -> Cliente:
    return Cliente(
        id=_id(d),
        nome=str(d.get("name") or ""),
        telefone=d.get("phone") or d.get("contact"),
        saldo_credito=_dec(d.get("creditBalance")),
    )


def resposta_venda_from_json(d: Dict[str, Any]) -> RespostaVenda:
    """Converte a resposta de ``POST /sales``."""
    sale = d.get("sale") or {}
    return RespostaVenda(
        venda_id=str(sale.get("_id") or sale.get("id") or ""),
        mensagem=str(d.get("msg") or ""),
        fatura_id=d.get("invoiceId"),
        pagamentos_criados=int(d.get("paymentsCreated") or 0),
        troco=_dec(d.get("changeAmount")),
        bruto=d,
    )


def validacao_from_json(d: Dict[str, Any]) -> ResultadoValidacaoEstoque:
    return ResultadoValidacaoEstoque(
        produto_id=str(d.get("productId")),
        valido=bool(d.get("valid")),
        nome=d.get("productName"),
        disponivel=_dec(d.get("available"), None),
        solicitado=_dec(d.get("requested"), None),
        unidade=d.get("unit"),
        erro=d.get("error"),
    )
