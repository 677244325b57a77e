"""
Composição do checkout: do carrinho finalizado ao payload de venda.

Pré-condições, nesta ordem (a primeira falha vence):
1. cliente selecionado          → ``CLIENTE_AUSENTE``
2. carrinho com ao menos 1 linha → ``CARRINHO_VAZIO``
3. total a pagar > 0            → ``TOTAL_ZERO``
Depois delas, o pagamento é validado (``PAGAMENTO_INVALIDO``).

A reconciliação pagamento x total é apenas consultiva: pagamento parcial
(ou a crédito) é permitido e só é marcado com ``parcial=True``. Quem decide
a política de pagamento parcial é o backend.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from vendas.config import DEFAULTS
from vendas.domain.carrinho import Carrinho
from vendas.domain.dinheiro import (
    ZERO,
    arredondar_dinheiro,
    converter_bs_para_usd,
    formatar_moeda,
    para_decimal,
)
from vendas.domain.erros import Resultado, TipoErro
from vendas.domain.models import (
    Cliente,
    ItemSubmissao,
    Pagamento,
    Reconciliacao,
    VendaSubmissao,
)
from vendas.infra.logger import log_checkout


def reconciliar_pagamento(total: Decimal, pagamento: Pagamento) -> Reconciliacao:
    """Confronta ``usd + bs/taxa + credito`` com o total da venda."""
    total = arredondar_dinheiro(total)
    pago = pagamento.valor_pago_usd + pagamento.credito_usado
    if pagamento.valor_pago_bs > 0 and pagamento.taxa_cambio > 0:
        pago += converter_bs_para_usd(pagamento.valor_pago_bs, pagamento.taxa_cambio)
    pago = arredondar_dinheiro(pago)
    return Reconciliacao(
        total=total,
        pago_equivalente_usd=pago,
        restante=max(ZERO, total - pago),
        troco=max(ZERO, pago - total),
        parcial=pago < total,
    )


def validar_pagamento(pagamento: Pagamento, cliente: Optional[Cliente] = None) -> Resultado[Pagamento]:
    """Valida a composição do pagamento (valores, taxa e crédito do cliente)."""
    for campo, valor in (
        ("valor_pago_usd", pagamento.valor_pago_usd),
        ("valor_pago_bs", pagamento.valor_pago_bs),
        ("credito_usado", pagamento.credito_usado),
    ):
        if valor < 0:
            return Resultado.falha(
                TipoErro.PAGAMENTO_INVALIDO, f"O campo {campo} não pode ser negativo", campo=campo
            )

    if pagamento.taxa_cambio <= 0:
        if pagamento.valor_pago_bs > 0:
            return Resultado.falha(
                TipoErro.PAGAMENTO_INVALIDO, "Informe uma taxa de câmbio válida", campo="taxa_cambio"
            )
        # pagamento só em USD/crédito: a taxa não importa, mas o backend exige > 0
        pagamento = replace(pagamento, taxa_cambio=para_decimal(DEFAULTS.taxa_cambio))

    if pagamento.credito_usado > 0:
        saldo = cliente.saldo_credito if cliente is not None else ZERO
        if pagamento.credito_usado > saldo:
            return Resultado.falha(
                TipoErro.PAGAMENTO_INVALIDO,
                f"Crédito usado ({formatar_moeda(pagamento.credito_usado)}) excede o saldo "
                f"do cliente ({formatar_moeda(saldo)})",
                campo="credito_usado",
            )
    return Resultado.sucesso(pagamento)


def montar_submissao(
    carrinho: Carrinho,
    cliente: Optional[Cliente],
    pagamento: Optional[Pagamento] = None,
    observacoes: Optional[str] = None,
) -> Resultado[VendaSubmissao]:
    """Monta o `VendaSubmissao` a partir do carrinho, cliente e pagamento.

    Sem ``pagamento`` a venda é enviada sem valor pago (fica pendente).
    Só os campos mínimos de cada linha são copiados; o backend recalcula
    os preços de forma autoritativa.
    """
    if cliente is None:
        msg = "Selecione um cliente antes de finalizar a venda"
        log_checkout("montar", {}, error=msg)
        return Resultado.falha(TipoErro.CLIENTE_AUSENTE, msg, campo="cliente")

    if carrinho.vazio:
        msg = "O carrinho está vazio"
        log_checkout("montar", {"cliente_id": cliente.id}, error=msg)
        return Resultado.falha(TipoErro.CARRINHO_VAZIO, msg, campo="itens")

    totais = carrinho.totais()
    if totais.total <= 0:
        msg = (
            f"Os descontos ({formatar_moeda(totais.descontos_itens + totais.desconto_total)}) "
            f"anulam o subtotal ({formatar_moeda(totais.subtotal)})"
        )
        log_checkout("montar", {"cliente_id": cliente.id}, error=msg)
        return Resultado.falha(TipoErro.TOTAL_ZERO, msg, campo="total")

    res_pg = validar_pagamento(pagamento or Pagamento(), cliente)
    if not res_pg.ok:
        log_checkout("montar", {"cliente_id": cliente.id}, error=res_pg.erro.mensagem)
        return Resultado(erro=res_pg.erro)
    pagamento = res_pg.valor

    itens = [
        ItemSubmissao(
            produto_id=l.produto_id,
            quantidade=l.quantidade,
            unidade_completa=l.unidade_completa,
            desconto=l.desconto,
        )
        for l in carrinho.linhas()
    ]
    submissao = VendaSubmissao(
        cliente_id=cliente.id,
        itens=itens,
        desconto_total=carrinho.desconto_total,
        pagamento=pagamento,
        reconciliacao=reconciliar_pagamento(totais.total, pagamento),
        observacoes=observacoes,
    )
    log_checkout(
        "montar",
        {"cliente_id": cliente.id, "itens": len(itens), "total": str(totais.total)},
        result={"parcial": submissao.parcial, "restante": str(submissao.reconciliacao.restante)},
    )
    return Resultado.sucesso(submissao)
