# vendas/usecases/sessao_venda.py
"""
Caso de uso: sessão de venda no ponto de venda.

Fluxo:
1) Carrega o snapshot do catálogo (produtos + inventário) do backend.
2) O operador seleciona o cliente e monta o carrinho (adicionar, quantidade,
   modo unidade/dose, remover, descontos).
3) Finaliza: monta a submissão, envia UMA vez ao backend e interpreta o
   resultado.
   - sucesso → descarta carrinho e cliente e recarrega o catálogo;
   - falha   → nada é descartado; o operador corrige e reenvia.

Observações:
- O teto de estoque do carrinho é consultivo (snapshot). A recusa do backend
  por estoque no momento do commit é a palavra final e vira
  ``ESTOQUE_EXCEDIDO``.
- Não há retry automático nem fila: enquanto um envio está pendente, outro
  não é emitido.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from vendas.adapters.api import BackendAPI, ErroAPI
from vendas.domain.carrinho import Carrinho, LinhaCarrinho
from vendas.domain.checkout import montar_submissao
from vendas.domain.dinheiro import formatar_moeda
from vendas.domain.erros import Resultado, TipoErro
from vendas.domain.models import (
    Cliente,
    ItemSubmissao,
    Pagamento,
    ProdutoComInventario,
    RespostaVenda,
    ResultadoValidacaoEstoque,
    VendaSubmissao,
)
from vendas.infra.logger import log_checkout, log_system_event


class SessaoVenda:
    def __init__(self, api: BackendAPI):
        self.api = api
        self.carrinho = Carrinho()
        self.cliente: Optional[Cliente] = None
        self.catalogo: Dict[str, ProdutoComInventario] = {}
        self._envio_pendente = False

    # -----------------------
    # catálogo
    # -----------------------

    def carregar_catalogo(self) -> List[ProdutoComInventario]:
        """Busca o snapshot do catálogo. Propaga `ErroAPI`."""
        produtos = self.api.listar_produtos_com_inventario()
        self.catalogo = {p.id: p for p in produtos}
        log_system_event("catalogo_carregado", {"produtos": len(produtos)})
        return produtos

    def buscar(self, termo: str = "") -> List[ProdutoComInventario]:
        """Filtra o catálogo por nome ou categoria (sem diferenciar maiúsculas)."""
        termo = (termo or "").strip().lower()
        produtos = list(self.catalogo.values())
        if not termo:
            return produtos
        return [
            p for p in produtos
            if termo in p.produto.nome.lower() or termo in p.produto.categoria.lower()
        ]

    # -----------------------
    # cliente
    # -----------------------

    def selecionar_cliente(self, cliente: Cliente) -> None:
        self.cliente = cliente
        log_system_event("cliente_selecionado", {"cliente_id": cliente.id})

    def limpar_cliente(self) -> None:
        self.cliente = None

    # -----------------------
    # carrinho
    # -----------------------

    def adicionar(self, produto_id: str, unidade_completa: bool = True) -> Resultado[LinhaCarrinho]:
        item = self.catalogo.get(produto_id)
        if item is None:
            return Resultado.falha(
                TipoErro.SEM_ESTOQUE,
                f"Produto {produto_id} não encontrado no catálogo",
                produto_id=produto_id,
            )
        return self.carrinho.adicionar_linha(item.produto, item.inventario, unidade_completa)

    def validar_estoque_remoto(self) -> List[ResultadoValidacaoEstoque]:
        """Pede ao backend a validação das linhas atuais. Propaga `ErroAPI`."""
        itens = [
            ItemSubmissao(l.produto_id, l.quantidade, l.unidade_completa)
            for l in self.carrinho.linhas()
        ]
        if not itens:
            return []
        return self.api.validar_estoque(itens)

    # -----------------------
    # checkout
    # -----------------------

    def verificar_pre_condicoes(self) -> Resultado[VendaSubmissao]:
        """Cliente, carrinho e total, sem pagamento e sem enviar nada."""
        return montar_submissao(self.carrinho, self.cliente)

    def finalizar(self, pagamento: Optional[Pagamento] = None, observacoes: Optional[str] = None) -> Resultado[RespostaVenda]:
        if self._envio_pendente:
            return Resultado.falha(
                TipoErro.ERRO_REDE_OU_SERVIDOR, "Já existe uma venda sendo enviada; aguarde a resposta"
            )

        res = montar_submissao(self.carrinho, self.cliente, pagamento, observacoes)
        if not res.ok:
            return Resultado(erro=res.erro)
        submissao = res.valor

        self._envio_pendente = True
        try:
            resposta = self.api.criar_venda(submissao)
        except ErroAPI as e:
            tipo = TipoErro.ESTOQUE_EXCEDIDO if e.rejeicao_estoque else TipoErro.ERRO_REDE_OU_SERVIDOR
            log_checkout("enviar", {"cliente_id": submissao.cliente_id}, error=e.mensagem)
            return Resultado.falha(tipo, e.mensagem, status=e.status)
        finally:
            self._envio_pendente = False

        log_checkout(
            "enviar",
            {"cliente_id": submissao.cliente_id, "itens": len(submissao.itens)},
            result={"venda_id": resposta.venda_id, "parcial": submissao.parcial},
        )
        self.carrinho = Carrinho()
        self.cliente = None
        self._recarregar_apos_venda()
        return Resultado.sucesso(resposta)

    def _recarregar_apos_venda(self) -> None:
        try:
            self.carregar_catalogo()
        except ErroAPI as e:
            log_system_event("catalogo_refresh_falhou", {"erro": e.mensagem}, level="warning")

    @staticmethod
    def mensagem_sucesso(resposta: RespostaVenda) -> str:
        if resposta.troco > 0:
            return f"Venda registrada. Troco: {formatar_moeda(resposta.troco)}"
        return "Venda registrada"
