# vendas/adapters/tui.py
"""
TUI (Text User Interface) do ponto de venda usando Rich.

Interface interativa baseada em menus:
- Busca de produtos e inclusão no carrinho (unidade ou dose)
- Edição do carrinho (quantidade, modo, remoção, descontos)
- Seleção de cliente
- Finalização com composição do pagamento (USD, Bs, crédito)
"""

from __future__ import annotations

from typing import List, Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from vendas.adapters.api import BackendAPI, ErroAPI
from vendas.adapters.parsers import parse_numero
from vendas.config import DEFAULTS
from vendas.domain.carrinho import LinhaCarrinho
from vendas.domain.checkout import reconciliar_pagamento
from vendas.domain.dinheiro import ZERO, converter_usd_para_bs, formatar_moeda, formatar_quantidade
from vendas.domain.erros import Resultado
from vendas.domain.models import Pagamento, ProdutoComInventario
from vendas.domain.policies import estoque_disponivel
from vendas.usecases.sessao_venda import SessaoVenda


def tabela_catalogo(produtos: List[ProdutoComInventario], title: str = "Catálogo") -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Produto")
    table.add_column("Categoria")
    table.add_column("Unidades", justify="right")
    table.add_column("Doses", justify="right")
    table.add_column("Preço un.", justify="right")
    table.add_column("Preço dose", justify="right")
    for i, item in enumerate(produtos, start=1):
        p = item.produto
        unidades = estoque_disponivel(p, item.inventario, True)
        doses = estoque_disponivel(p, item.inventario, False) if p.divisivel else None
        table.add_row(
            str(i),
            p.nome,
            p.categoria,
            f"{formatar_quantidade(unidades)} {p.unidade}",
            f"{formatar_quantidade(doses)} {p.unidade_dose}" if doses is not None else "—",
            formatar_moeda(p.preco_venda),
            formatar_moeda(p.preco_por_dose) if p.divisivel and p.preco_por_dose is not None else "—",
            style=None if item.tem_estoque else "dim",
        )
    return table


class PontoVendaTUI:
    """Text User Interface para o ponto de venda."""

    def __init__(self, api: BackendAPI, console: Optional[Console] = None):
        self.console = console or Console()
        self.sessao = SessaoVenda(api)

    def run(self) -> None:
        """Inicia a interface principal."""
        self.show_banner()
        self.recarregar_catalogo()

        while True:
            try:
                self.mostrar_carrinho()
                choice = self.show_main_menu()
                if choice == "1":
                    self.adicionar_produto()
                elif choice == "2":
                    self.alterar_quantidade()
                elif choice == "3":
                    self.alternar_modo()
                elif choice == "4":
                    self.remover_item()
                elif choice == "5":
                    self.descontos()
                elif choice == "6":
                    self.selecionar_cliente()
                elif choice == "7":
                    self.finalizar()
                elif choice == "8":
                    self.recarregar_catalogo()
                elif choice == "9":
                    self.validar_estoque()
                elif choice == "0":
                    self.console.print("\n[green]Saindo do ponto de venda...[/green]")
                    break
            except KeyboardInterrupt:
                self.console.print("\n[red]Saindo...[/red]")
                break
            except ValueError as e:
                self.console.print(f"[red]Valor inválido: {e}[/red]")

    def show_banner(self) -> None:
        banner = Panel.fit(
            "[bold blue]PONTO DE VENDA — CLÍNICA VETERINÁRIA[/bold blue]\n"
            "[cyan]Venda por unidade ou por dose[/cyan]",
            border_style="blue",
        )
        self.console.print(Align.center(banner))

    def show_main_menu(self) -> str:
        menu = Panel(
            "[yellow]1.[/yellow] Adicionar produto\n"
            "[yellow]2.[/yellow] Alterar quantidade\n"
            "[yellow]3.[/yellow] Alternar unidade/dose\n"
            "[yellow]4.[/yellow] Remover item\n"
            "[yellow]5.[/yellow] Descontos\n"
            "[yellow]6.[/yellow] Cliente\n"
            "[yellow]7.[/yellow] Finalizar venda\n"
            "[yellow]8.[/yellow] Recarregar catálogo\n"
            "[yellow]9.[/yellow] Validar estoque no servidor\n"
            "[yellow]0.[/yellow] Sair",
            title="Opções",
            border_style="green",
        )
        self.console.print(menu)
        return Prompt.ask("Escolha uma opção", choices=[str(i) for i in range(10)])

    # -----------------------
    # feedback
    # -----------------------

    def notificar(self, res: Resultado, sucesso: Optional[str] = None) -> bool:
        if res.ok:
            if sucesso:
                self.console.print(f"[green]{sucesso}[/green]")
            return True
        self.console.print(f"[bold red]{res.erro.mensagem}[/bold red]")
        return False

    # -----------------------
    # telas
    # -----------------------

    def mostrar_carrinho(self) -> None:
        sessao = self.sessao
        cliente = sessao.cliente
        cab = f"Cliente: [bold]{cliente.nome}[/bold]" if cliente else "Cliente: [dim]nenhum[/dim]"
        if cliente and cliente.saldo_credito > 0:
            cab += f"  (crédito {formatar_moeda(cliente.saldo_credito)})"
        self.console.print(cab)

        if sessao.carrinho.vazio:
            self.console.print(Panel("Carrinho vazio", border_style="yellow"))
            return

        table = Table(title=f"Carrinho ({formatar_quantidade(sessao.carrinho.quantidade_itens())} itens)")
        table.add_column("#", justify="right")
        table.add_column("Produto")
        table.add_column("Qtd", justify="right")
        table.add_column("Preço", justify="right")
        table.add_column("Desc.", justify="right")
        table.add_column("Total", justify="right")
        for i, linha in enumerate(sessao.carrinho.linhas(), start=1):
            preco = formatar_moeda(linha.preco.valor)
            if linha.preco.fallback:
                preco += " [yellow](sem preço/dose)[/yellow]"
            table.add_row(
                str(i),
                linha.nome_produto,
                f"{formatar_quantidade(linha.quantidade)} {linha.rotulo_unidade}",
                preco,
                formatar_moeda(linha.desconto),
                formatar_moeda(linha.total),
            )
        self.console.print(table)
        t = sessao.carrinho.totais()
        self.console.print(
            f"Subtotal {formatar_moeda(t.subtotal)} | Desc. itens {formatar_moeda(t.descontos_itens)} | "
            f"Desc. geral {formatar_moeda(t.desconto_total)} | [bold]Total {formatar_moeda(t.total)}[/bold]"
        )

    def _escolher_linha(self) -> Optional[LinhaCarrinho]:
        linhas = self.sessao.carrinho.linhas()
        if not linhas:
            self.console.print("[yellow]Carrinho vazio[/yellow]")
            return None
        idx = Prompt.ask("Item #", choices=[str(i) for i in range(1, len(linhas) + 1)])
        return linhas[int(idx) - 1]

    def adicionar_produto(self) -> None:
        termo = Prompt.ask("Buscar (nome ou categoria)", default="")
        produtos = self.sessao.buscar(termo)
        if not produtos:
            self.console.print("[yellow]Nenhum produto encontrado[/yellow]")
            return
        self.console.print(tabela_catalogo(produtos, title="Produtos"))
        idx = Prompt.ask("Produto #", choices=[str(i) for i in range(1, len(produtos) + 1)])
        item = produtos[int(idx) - 1]
        unidade_completa = True
        if item.produto.divisivel:
            modo = Prompt.ask("Vender por", choices=["unidade", "dose"], default="unidade")
            unidade_completa = modo == "unidade"
        res = self.sessao.adicionar(item.id, unidade_completa)
        self.notificar(res, f'"{item.produto.nome}" adicionado')

    def alterar_quantidade(self) -> None:
        linha = self._escolher_linha()
        if linha is None:
            return
        qtd = parse_numero(Prompt.ask(f"Nova quantidade ({linha.rotulo_unidade})"))
        if qtd is None:
            self.console.print("[red]Quantidade inválida[/red]")
            return
        res = self.sessao.carrinho.atualizar_quantidade(linha.produto_id, linha.unidade_completa, qtd)
        self.notificar(res)

    def alternar_modo(self) -> None:
        linha = self._escolher_linha()
        if linha is None:
            return
        if not linha.divisivel:
            self.console.print(f'[yellow]"{linha.nome_produto}" não é divisível[/yellow]')
            return
        res = self.sessao.carrinho.alternar_modo(linha.produto_id, linha.unidade_completa)
        self.notificar(res)

    def remover_item(self) -> None:
        linha = self._escolher_linha()
        if linha is not None:
            self.sessao.carrinho.remover_linha(linha.produto_id, linha.unidade_completa)

    def descontos(self) -> None:
        tipo = Prompt.ask("Desconto", choices=["item", "geral"], default="geral")
        if tipo == "geral":
            valor = parse_numero(Prompt.ask("Desconto geral (USD)", default="0"))
            self.notificar(self.sessao.carrinho.definir_desconto_total(valor if valor is not None else ZERO))
            return
        linha = self._escolher_linha()
        if linha is None:
            return
        valor = parse_numero(Prompt.ask("Desconto do item (USD)", default="0"))
        res = self.sessao.carrinho.definir_desconto_linha(
            linha.produto_id, linha.unidade_completa, valor if valor is not None else ZERO
        )
        self.notificar(res)

    def selecionar_cliente(self) -> None:
        if self.sessao.cliente and Confirm.ask("Remover o cliente atual?", default=False):
            self.sessao.limpar_cliente()
            return
        try:
            clientes = self.sessao.api.listar_clientes()
        except ErroAPI as e:
            self.console.print(f"[red]{e.mensagem}[/red]")
            return
        termo = Prompt.ask("Buscar cliente", default="").strip().lower()
        if termo:
            clientes = [c for c in clientes if termo in c.nome.lower() or termo in (c.telefone or "")]
        if not clientes:
            self.console.print("[yellow]Nenhum cliente encontrado[/yellow]")
            return
        table = Table(title="Clientes")
        table.add_column("#", justify="right")
        table.add_column("Nome")
        table.add_column("Telefone")
        table.add_column("Crédito", justify="right")
        for i, c in enumerate(clientes, start=1):
            table.add_row(str(i), c.nome, c.telefone or "", formatar_moeda(c.saldo_credito))
        self.console.print(table)
        idx = Prompt.ask("Cliente #", choices=[str(i) for i in range(1, len(clientes) + 1)])
        self.sessao.selecionar_cliente(clientes[int(idx) - 1])

    def _pedir_pagamento(self) -> Pagamento:
        total = self.sessao.carrinho.totais().total
        taxa = parse_numero(Prompt.ask("Taxa (Bs por USD)", default=str(DEFAULTS.taxa_cambio))) or ZERO
        linha_total = f"Total a pagar: [bold]{formatar_moeda(total)}[/bold]"
        if taxa > 0:
            linha_total += f" ({formatar_moeda(converter_usd_para_bs(total, taxa), 'Bs')})"
        self.console.print(linha_total)
        usd = parse_numero(Prompt.ask("Pago em USD", default=str(total))) or ZERO
        bs = parse_numero(Prompt.ask("Pago em Bs", default="0")) or ZERO
        credito = ZERO
        cliente = self.sessao.cliente
        if cliente and cliente.saldo_credito > 0:
            credito = parse_numero(Prompt.ask("Crédito a usar", default="0")) or ZERO
        metodo = Prompt.ask("Método de pagamento (id)", default="") or None
        referencia = Prompt.ask("Referência", default="") or None
        return Pagamento(
            valor_pago_usd=usd,
            valor_pago_bs=bs,
            taxa_cambio=taxa,
            credito_usado=credito,
            metodo_pagamento_id=metodo,
            referencia=referencia,
        )

    def finalizar(self) -> None:
        previa = self.sessao.verificar_pre_condicoes()
        if not self.notificar(previa):
            return
        pagamento = self._pedir_pagamento()
        rec = reconciliar_pagamento(self.sessao.carrinho.totais().total, pagamento)
        if rec.parcial:
            self.console.print(
                f"[yellow]Pagamento parcial: restam {formatar_moeda(rec.restante)}[/yellow]"
            )
        if not Confirm.ask("Confirmar venda?", default=True):
            return
        res = self.sessao.finalizar(pagamento)
        if self.notificar(res):
            self.console.print(f"[bold green]{SessaoVenda.mensagem_sucesso(res.valor)}[/bold green]")

    def validar_estoque(self) -> None:
        try:
            resultados = self.sessao.validar_estoque_remoto()
        except ErroAPI as e:
            self.console.print(f"[red]{e.mensagem}[/red]")
            return
        if not resultados:
            self.console.print("[yellow]Carrinho vazio[/yellow]")
            return
        for r in resultados:
            if r.valido:
                self.console.print(f"[green]✓ {r.nome or r.produto_id}[/green]")
            else:
                self.console.print(f"[bold red]✗ {r.nome or r.produto_id}: {r.erro or 'estoque insuficiente'}[/bold red]")

    def recarregar_catalogo(self) -> None:
        try:
            produtos = self.sessao.carregar_catalogo()
            self.console.print(f"[dim]{len(produtos)} produtos carregados[/dim]")
        except ErroAPI as e:
            self.console.print(f"[red]{e.mensagem}[/red]")


def main_tui(api: BackendAPI) -> None:
    PontoVendaTUI(api).run()
