# vendas/domain/models.py
"""
Modelos (dataclasses) do domínio de vendas.

Observação importante:
- O catálogo (Produto + Inventario) é um snapshot somente leitura vindo do
  backend; o carrinho nunca altera esses objetos, por isso são `frozen`.
- Valores monetários e quantidades são `Decimal` (ver `domain.dinheiro`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from vendas.domain.dinheiro import ZERO, arredondar_dinheiro, para_decimal


@dataclass(frozen=True)
class Produto:
    """Cadastro de produto vendável."""
    id: str
    nome: str
    categoria: str = "otro"
    unidade: str = "unidad"            # rótulo da venda por unidade inteira
    unidade_dose: str = "dosis"        # rótulo da venda fracionada
    doses_por_unidade: Decimal = Decimal("1")
    divisivel: bool = False
    preco_venda: Decimal = ZERO        # preço por unidade inteira
    preco_por_dose: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "doses_por_unidade", para_decimal(self.doses_por_unidade))
        object.__setattr__(self, "preco_venda", arredondar_dinheiro(self.preco_venda))
        if self.preco_por_dose is not None:
            object.__setattr__(self, "preco_por_dose", arredondar_dinheiro(self.preco_por_dose))
        if self.doses_por_unidade < 1:
            raise ValueError(f"{self.nome}: doses_por_unidade deve ser >= 1")
        if self.preco_venda < 0:
            raise ValueError(f"{self.nome}: preco_venda não pode ser negativo")
        if self.preco_por_dose is not None and self.preco_por_dose < 0:
            raise ValueError(f"{self.nome}: preco_por_dose não pode ser negativo")


@dataclass(frozen=True)
class Inventario:
    """Estoque de um produto: unidades fechadas + doses soltas."""
    unidades: Decimal = ZERO
    doses: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "unidades", para_decimal(self.unidades))
        object.__setattr__(self, "doses", para_decimal(self.doses))
        if self.unidades < 0 or self.doses < 0:
            raise ValueError("estoque não pode ser negativo")


@dataclass(frozen=True)
class ProdutoComInventario:
    """Linha do catálogo: produto + inventário (pode não existir ainda)."""
    produto: Produto
    inventario: Optional[Inventario] = None

    @property
    def id(self) -> str:
        return self.produto.id

    @property
    def total_doses(self) -> Decimal:
        if self.inventario is None:
            return ZERO
        return self.inventario.unidades * self.produto.doses_por_unidade + self.inventario.doses

    @property
    def tem_estoque(self) -> bool:
        inv = self.inventario
        return inv is not None and (inv.unidades > 0 or inv.doses > 0)


@dataclass(frozen=True)
class Cliente:
    """Cliente (tutor) selecionado para a venda."""
    id: str
    nome: str
    telefone: Optional[str] = None
    saldo_credito: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "saldo_credito", arredondar_dinheiro(self.saldo_credito))


@dataclass(frozen=True)
class ChaveLinha:
    """Chave composta de uma linha do carrinho."""
    produto_id: str
    unidade_completa: bool

    def oposta(self) -> "ChaveLinha":
        return ChaveLinha(self.produto_id, not self.unidade_completa)


@dataclass(frozen=True)
class Totais:
    subtotal: Decimal
    descontos_itens: Decimal
    desconto_total: Decimal
    total: Decimal


@dataclass(frozen=True)
class Pagamento:
    """Composição do pagamento informada pelo colaborador de pagamento."""
    valor_pago_usd: Decimal = ZERO
    valor_pago_bs: Decimal = ZERO
    taxa_cambio: Decimal = Decimal("1")
    credito_usado: Decimal = ZERO
    metodo_pagamento_id: Optional[str] = None
    referencia: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "valor_pago_usd", arredondar_dinheiro(self.valor_pago_usd))
        object.__setattr__(self, "valor_pago_bs", arredondar_dinheiro(self.valor_pago_bs))
        object.__setattr__(self, "taxa_cambio", para_decimal(self.taxa_cambio))
        object.__setattr__(self, "credito_usado", arredondar_dinheiro(self.credito_usado))


@dataclass(frozen=True)
class Reconciliacao:
    """Resultado (consultivo) do confronto pagamento x total."""
    total: Decimal
    pago_equivalente_usd: Decimal
    restante: Decimal
    troco: Decimal
    parcial: bool


@dataclass(frozen=True)
class ItemSubmissao:
    produto_id: str
    quantidade: Decimal
    unidade_completa: bool
    desconto: Decimal = ZERO


@dataclass(frozen=True)
class VendaSubmissao:
    """Payload de checkout, construído uma vez por tentativa."""
    cliente_id: str
    itens: List[ItemSubmissao]
    desconto_total: Decimal
    pagamento: Pagamento
    reconciliacao: Reconciliacao
    observacoes: Optional[str] = None

    @property
    def parcial(self) -> bool:
        return self.reconciliacao.parcial

    def para_payload(self) -> Dict[str, Any]:
        """Converte para o JSON esperado pelo backend (`POST /sales`)."""
        pg = self.pagamento
        payload: Dict[str, Any] = {
            "ownerId": self.cliente_id,
            "items": [
                {
                    "productId": it.produto_id,
                    "quantity": float(it.quantidade),
                    "isFullUnit": it.unidade_completa,
                    "discount": float(it.desconto),
                }
                for it in self.itens
            ],
            "discountTotal": float(self.desconto_total),
            "amountPaidUSD": float(pg.valor_pago_usd),
            "amountPaidBs": float(pg.valor_pago_bs),
            "creditUsed": float(pg.credito_usado),
            "exchangeRate": float(pg.taxa_cambio),
        }
        if pg.metodo_pagamento_id:
            payload["paymentMethodId"] = pg.metodo_pagamento_id
        if pg.referencia:
            payload["paymentReference"] = pg.referencia
        if self.observacoes:
            payload["notes"] = self.observacoes
        return payload


@dataclass(frozen=True)
class RespostaVenda:
    """Resposta do backend a uma venda criada."""
    venda_id: str
    mensagem: str = ""
    fatura_id: Optional[str] = None
    pagamentos_criados: int = 0
    troco: Decimal = ZERO
    bruto: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ResultadoValidacaoEstoque:
    produto_id: str
    valido: bool
    nome: Optional[str] = None
    disponivel: Optional[Decimal] = None
    solicitado: Optional[Decimal] = None
    unidade: Optional[str] = None
    erro: Optional[str] = None
