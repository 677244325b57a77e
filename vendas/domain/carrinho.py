"""
Carrinho de vendas com linhas por unidade inteira ou por dose.

Cada linha é identificada por ``ChaveLinha(produto_id, unidade_completa)``:
o mesmo produto pode aparecer duas vezes, uma vendida em unidades fechadas e
outra em doses soltas. A ordem de inserção é mantida apenas para exibição.

Invariantes mantidos por todas as operações:
- ``0 < quantidade <= estoque_disponivel`` para o modo atual de cada linha;
- subtotal, total da linha e totais do carrinho são sempre derivados das
  linhas no momento da leitura, nunca armazenados.

Operações recusadas retornam `Resultado.falha` e não alteram o estado.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from vendas.domain.dinheiro import (
    PASSO_DOSE,
    ZERO,
    Numero,
    arredondar_dinheiro,
    formatar_quantidade,
    multiplicar,
    normalizar_quantidade,
    para_decimal,
)
from vendas.domain.erros import Resultado, TipoErro
from vendas.domain.models import ChaveLinha, Inventario, Produto, Totais
from vendas.domain.policies import Preco, estoque_disponivel, preco_unitario
from vendas.infra.logger import log_carrinho


@dataclass
class LinhaCarrinho:
    """Presença de um produto no carrinho, num modo de venda."""
    produto: Produto
    inventario: Optional[Inventario]
    quantidade: Decimal
    unidade_completa: bool
    desconto: Decimal = ZERO
    # preços fixados quando a linha é criada
    preco_unidade: Optional[Preco] = None
    preco_dose: Optional[Preco] = None

    def __post_init__(self):
        if self.preco_unidade is None:
            self.preco_unidade = preco_unitario(self.produto, True)
        if self.preco_dose is None:
            self.preco_dose = preco_unitario(self.produto, False)

    @property
    def chave(self) -> ChaveLinha:
        return ChaveLinha(self.produto.id, self.unidade_completa)

    @property
    def produto_id(self) -> str:
        return self.produto.id

    @property
    def nome_produto(self) -> str:
        return self.produto.nome

    @property
    def divisivel(self) -> bool:
        return self.produto.divisivel

    @property
    def preco(self) -> Preco:
        return self.preco_unidade if self.unidade_completa else self.preco_dose

    @property
    def estoque_disponivel(self) -> Decimal:
        return estoque_disponivel(self.produto, self.inventario, self.unidade_completa)

    @property
    def rotulo_unidade(self) -> str:
        return self.produto.unidade if self.unidade_completa else self.produto.unidade_dose

    @property
    def subtotal(self) -> Decimal:
        return multiplicar(self.preco.valor, self.quantidade)

    @property
    def total(self) -> Decimal:
        # pode ficar negativo; o clamp é feito no total do carrinho
        return self.subtotal - self.desconto

    def descricao(self) -> str:
        return f"{self.nome_produto} ({formatar_quantidade(self.quantidade)} {self.rotulo_unidade})"


class Carrinho:
    """Agregado de linhas + desconto geral do pedido."""

    def __init__(self):
        self._linhas: Dict[ChaveLinha, LinhaCarrinho] = {}
        self.desconto_total: Decimal = ZERO

    # -----------------------
    # leitura
    # -----------------------

    def __len__(self) -> int:
        return len(self._linhas)

    def __iter__(self) -> Iterator[LinhaCarrinho]:
        return iter(list(self._linhas.values()))

    @property
    def vazio(self) -> bool:
        return not self._linhas

    def linhas(self) -> List[LinhaCarrinho]:
        return list(self._linhas.values())

    def obter(self, produto_id: str, unidade_completa: bool) -> Optional[LinhaCarrinho]:
        return self._linhas.get(ChaveLinha(produto_id, unidade_completa))

    def quantidade_itens(self) -> Decimal:
        return sum((l.quantidade for l in self._linhas.values()), ZERO)

    def totais(self) -> Totais:
        """Recalcula subtotal, descontos e total a partir das linhas."""
        subtotal = sum((l.subtotal for l in self._linhas.values()), ZERO)
        descontos_itens = sum((l.desconto for l in self._linhas.values()), ZERO)
        total = max(ZERO, subtotal - descontos_itens - self.desconto_total)
        return Totais(
            subtotal=arredondar_dinheiro(subtotal),
            descontos_itens=arredondar_dinheiro(descontos_itens),
            desconto_total=self.desconto_total,
            total=arredondar_dinheiro(total),
        )

    def descricoes_pagamento(self) -> List[Dict[str, object]]:
        """Linhas no formato entregue ao colaborador de pagamento."""
        return [
            {"descricao": l.descricao(), "quantidade": 1, "preco_unitario": l.total, "total": l.total}
            for l in self._linhas.values()
        ]

    # -----------------------
    # mutações
    # -----------------------

    def adicionar_linha(
        self,
        produto: Produto,
        inventario: Optional[Inventario],
        unidade_completa: bool = True,
    ) -> Resultado[LinhaCarrinho]:
        """Adiciona uma unidade do produto no modo pedido (ou cria a linha)."""
        disponivel = normalizar_quantidade(
            estoque_disponivel(produto, inventario, unidade_completa), unidade_completa
        )
        if disponivel <= 0:
            if not unidade_completa and not produto.divisivel:
                msg = f'"{produto.nome}" não é vendido por {produto.unidade_dose}'
            else:
                msg = f'Sem estoque de "{produto.nome}"'
            log_carrinho("add", produto.id, unidade_completa, error=msg)
            return Resultado.falha(TipoErro.SEM_ESTOQUE, msg, produto_id=produto.id)

        chave = ChaveLinha(produto.id, unidade_completa)
        linha = self._linhas.get(chave)
        if linha is not None:
            if linha.quantidade >= disponivel:
                msg = f'Estoque máximo de "{produto.nome}": {formatar_quantidade(disponivel)}'
                log_carrinho("add", produto.id, unidade_completa, error=msg)
                return Resultado.falha(
                    TipoErro.ESTOQUE_EXCEDIDO, msg, produto_id=produto.id, disponivel=disponivel
                )
            # só o teto é atualizado; o preço da linha continua o da inclusão
            linha.inventario = inventario
            linha.quantidade = min(linha.quantidade + 1, disponivel)
        else:
            quantidade = normalizar_quantidade(min(Decimal("1"), disponivel), unidade_completa)
            linha = LinhaCarrinho(produto, inventario, quantidade, unidade_completa)
            self._linhas[chave] = linha
            if linha.preco.fallback:
                log_carrinho("price_fallback", produto.id, unidade_completa, preco=str(linha.preco.valor))
        log_carrinho("add", produto.id, unidade_completa, quantidade=str(linha.quantidade))
        return Resultado.sucesso(linha)

    def atualizar_quantidade(
        self,
        produto_id: str,
        unidade_completa: bool,
        quantidade: Numero,
    ) -> Resultado[Optional[LinhaCarrinho]]:
        """Define a quantidade de uma linha; ``<= 0`` remove a linha.

        Um valor positivo que a precisão do modo zeraria (``0.5`` unidade)
        vira a menor quantidade do modo, nunca uma remoção.

        Raises:
            ValueError: se ``quantidade`` não for numérica.
        """
        if para_decimal(quantidade) <= 0:
            self.remover_linha(produto_id, unidade_completa)
            return Resultado.sucesso(None)
        nova = normalizar_quantidade(quantidade, unidade_completa)
        if nova <= 0:
            nova = Decimal("1") if unidade_completa else PASSO_DOSE

        linha = self.obter(produto_id, unidade_completa)
        if linha is None:
            return self._linha_inexistente("update", produto_id, unidade_completa)

        if nova > linha.estoque_disponivel:
            msg = (
                f'Estoque máximo de "{linha.nome_produto}": '
                f"{formatar_quantidade(linha.estoque_disponivel)} {linha.rotulo_unidade}"
            )
            log_carrinho("update", produto_id, unidade_completa, error=msg, solicitado=str(nova))
            return Resultado.falha(
                TipoErro.ESTOQUE_EXCEDIDO,
                msg,
                produto_id=produto_id,
                disponivel=linha.estoque_disponivel,
                solicitado=nova,
            )

        linha.quantidade = nova
        log_carrinho("update", produto_id, unidade_completa, quantidade=str(nova))
        return Resultado.sucesso(linha)

    def alternar_modo(
        self,
        produto_id: str,
        unidade_completa: Optional[bool] = None,
    ) -> Resultado[Optional[LinhaCarrinho]]:
        """Troca a linha entre unidade inteira e dose.

        Sempre tem sucesso quando a linha existe: se o teto do novo modo for
        menor que a quantidade, a quantidade é reduzida ao teto. Se já existir
        uma linha no modo de destino, as duas são somadas (limitado ao teto).
        Produto não divisível: nada muda.
        """
        linha = self._localizar(produto_id, unidade_completa)
        if linha is None:
            return self._linha_inexistente("toggle", produto_id, unidade_completa)
        if not linha.divisivel:
            return Resultado.sucesso(linha)

        destino = linha.chave.oposta()
        teto = estoque_disponivel(linha.produto, linha.inventario, destino.unidade_completa)
        if teto <= 0:
            log_carrinho("toggle", produto_id, linha.unidade_completa, sem_estoque_destino=True)
            return Resultado.sucesso(linha)

        quantidade = normalizar_quantidade(linha.quantidade, destino.unidade_completa)
        if quantidade <= 0:
            quantidade = normalizar_quantidade(min(Decimal("1"), teto), destino.unidade_completa)

        existente = self._linhas.get(destino)
        if existente is not None:
            existente.quantidade = min(existente.quantidade + quantidade, teto)
            existente.desconto = existente.desconto + linha.desconto
            del self._linhas[linha.chave]
            log_carrinho("toggle", produto_id, destino.unidade_completa,
                         quantidade=str(existente.quantidade), mesclado=True)
            return Resultado.sucesso(existente)

        origem = linha.chave
        linha.unidade_completa = destino.unidade_completa
        linha.quantidade = min(quantidade, teto)
        self._linhas = {
            (destino if k == origem else k): v for k, v in self._linhas.items()
        }
        if linha.preco.fallback:
            log_carrinho("price_fallback", produto_id, linha.unidade_completa, preco=str(linha.preco.valor))
        log_carrinho("toggle", produto_id, linha.unidade_completa, quantidade=str(linha.quantidade))
        return Resultado.sucesso(linha)

    def remover_linha(self, produto_id: str, unidade_completa: bool) -> Resultado[bool]:
        """Remove a linha; chamar de novo é inofensivo."""
        removida = self._linhas.pop(ChaveLinha(produto_id, unidade_completa), None)
        if removida is not None:
            log_carrinho("remove", produto_id, unidade_completa)
        return Resultado.sucesso(removida is not None)

    def definir_desconto_total(self, valor: Numero) -> Resultado[Decimal]:
        """Desconto geral do pedido (>= 0)."""
        d = arredondar_dinheiro(valor)
        if d < 0:
            msg = "O desconto total não pode ser negativo"
            log_carrinho("discount", "*", error=msg, valor=str(d))
            return Resultado.falha(TipoErro.DESCONTO_INVALIDO, msg, campo="desconto_total")
        self.desconto_total = d
        log_carrinho("discount", "*", valor=str(d))
        return Resultado.sucesso(d)

    def definir_desconto_linha(
        self,
        produto_id: str,
        unidade_completa: bool,
        valor: Numero,
    ) -> Resultado[LinhaCarrinho]:
        """Desconto de uma linha (>= 0); pode superar o subtotal da linha."""
        linha = self.obter(produto_id, unidade_completa)
        if linha is None:
            return self._linha_inexistente("discount", produto_id, unidade_completa)
        d = arredondar_dinheiro(valor)
        if d < 0:
            msg = f'O desconto de "{linha.nome_produto}" não pode ser negativo'
            log_carrinho("discount", produto_id, unidade_completa, error=msg)
            return Resultado.falha(TipoErro.DESCONTO_INVALIDO, msg, produto_id=produto_id)
        linha.desconto = d
        log_carrinho("discount", produto_id, unidade_completa, valor=str(d))
        return Resultado.sucesso(linha)

    def limpar(self) -> None:
        self._linhas.clear()
        self.desconto_total = ZERO

    # -----------------------
    # util
    # -----------------------

    def _localizar(self, produto_id: str, unidade_completa: Optional[bool]) -> Optional[LinhaCarrinho]:
        if unidade_completa is not None:
            return self.obter(produto_id, unidade_completa)
        for linha in self._linhas.values():
            if linha.produto_id == produto_id:
                return linha
        return None

    def _linha_inexistente(self, action: str, produto_id: str, unidade_completa: Optional[bool]) -> Resultado:
        msg = f"Produto {produto_id} não está no carrinho"
        log_carrinho(action, produto_id, unidade_completa, error=msg)
        return Resultado.falha(TipoErro.LINHA_INEXISTENTE, msg, produto_id=produto_id)
