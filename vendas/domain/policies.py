"""
Políticas de estoque e preço para a venda por unidade ou por dose.

Este módulo contém as funções que resolvem, para um snapshot do catálogo e
um modo de venda (unidade inteira x dose), o teto de estoque disponível e o
preço unitário a aplicar. São funções puras: devem ser reavaliadas sempre
que o snapshot for atualizado, pois o teto é apenas uma leitura pontual.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from vendas.domain.dinheiro import ZERO
from vendas.domain.models import Inventario, Produto


class OrigemPreco(str, Enum):
    RESOLVIDO = "RESOLVIDO"
    FALLBACK_UNIDADE = "FALLBACK_UNIDADE"


@dataclass(frozen=True)
class Preco:
    """Preço resolvido, marcado com a sua origem."""
    valor: Decimal
    origem: OrigemPreco = OrigemPreco.RESOLVIDO

    @property
    def fallback(self) -> bool:
        return self.origem is OrigemPreco.FALLBACK_UNIDADE


def estoque_disponivel(produto: Produto, inventario: Optional[Inventario], unidade_completa: bool) -> Decimal:
    """Calcula o teto de estoque para o modo de venda.

    Regras:
        - Sem inventário → ``0``.
        - Unidade inteira → ``inventario.unidades``.
        - Dose (apenas produtos divisíveis) →
          ``unidades * doses_por_unidade + doses``.
        - Dose em produto não divisível → ``0`` (o modo não existe).

    Args:
        produto: Produto do catálogo.
        inventario: Snapshot do inventário (ou ``None``).
        unidade_completa: ``True`` para venda por unidade inteira.

    Returns:
        A quantidade máxima vendável no modo pedido.
    """
    if inventario is None:
        return ZERO
    if unidade_completa:
        return inventario.unidades
    if not produto.divisivel:
        return ZERO
    return inventario.unidades * produto.doses_por_unidade + inventario.doses


def preco_unitario(produto: Produto, unidade_completa: bool) -> Preco:
    """Resolve o preço a aplicar por unidade do modo de venda.

    Na venda por dose usa ``preco_por_dose``; se ele não estiver cadastrado,
    devolve ``preco_venda`` marcado como ``FALLBACK_UNIDADE`` para que o
    chamador possa avisar em vez de substituir silenciosamente.
    """
    if unidade_completa:
        return Preco(produto.preco_venda)
    if produto.preco_por_dose is None:
        return Preco(produto.preco_venda, OrigemPreco.FALLBACK_UNIDADE)
    return Preco(produto.preco_por_dose)
