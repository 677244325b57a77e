"""
CLI do ponto de venda (Typer).

Comandos principais:
- catalogo                 -> lista produtos com estoque por unidade e por dose
- validar-estoque          -> pede ao backend a validação de uma quantidade
- config show              -> mostra a configuração efetiva
- vender / tui             -> sessão interativa de venda (Rich)
"""

from __future__ import annotations

import json
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vendas.adapters.api import BackendAPI, ErroAPI
from vendas.adapters.parsers import parse_numero
from vendas.adapters.tui import main_tui, tabela_catalogo
from vendas.config import API_URL, DEFAULTS, LOGS_DIR
from vendas.domain.dinheiro import formatar_quantidade
from vendas.domain.models import ItemSubmissao


app = typer.Typer(help="Ponto de Venda Clínica — CLI")
console = Console()


def _api_factory(base_url: str) -> BackendAPI:
    return BackendAPI(base_url=base_url)


def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


# -----------------------
# catálogo
# -----------------------

@app.command("catalogo")
def cmd_catalogo(
    busca: str = typer.Option("", "--busca", help="Filtra por nome ou categoria"),
    api_url: str = typer.Option(API_URL, "--api", help="URL base do backend"),
):
    """Lista o catálogo com estoque em unidades e em doses."""
    with _api_factory(api_url) as api:
        try:
            produtos = api.listar_produtos_com_inventario()
        except ErroAPI as e:
            console.print(f"[red]{e.mensagem}[/red]")
            raise typer.Exit(code=1)
    termo = busca.strip().lower()
    if termo:
        produtos = [
            p for p in produtos
            if termo in p.produto.nome.lower() or termo in p.produto.categoria.lower()
        ]
    if not produtos:
        console.print(Panel("Nenhum produto encontrado", title="Catálogo", border_style="yellow"))
        return
    console.print(tabela_catalogo(produtos))


@app.command("validar-estoque")
def cmd_validar_estoque(
    produto_id: str = typer.Argument(..., help="Id do produto"),
    quantidade: str = typer.Argument(..., help="Quantidade (ex.: 2 ou 2,5)"),
    dose: bool = typer.Option(False, "--dose", help="Quantidade em doses"),
    api_url: str = typer.Option(API_URL, "--api", help="URL base do backend"),
):
    """Valida no backend se há estoque para a quantidade informada."""
    qtd = parse_numero(quantidade)
    if qtd is None or qtd <= 0:
        typer.echo("Quantidade inválida.")
        raise typer.Exit(code=1)
    with _api_factory(api_url) as api:
        try:
            resultados = api.validar_estoque([ItemSubmissao(produto_id, qtd, not dose)])
        except ErroAPI as e:
            console.print(f"[red]{e.mensagem}[/red]")
            raise typer.Exit(code=1)

    table = Table(title="Validação de Estoque")
    table.add_column("Produto")
    table.add_column("Solicitado", justify="right")
    table.add_column("Disponível", justify="right")
    table.add_column("Status")
    ok = True
    for r in resultados:
        ok = ok and r.valido
        table.add_row(
            r.nome or r.produto_id,
            formatar_quantidade(r.solicitado) if r.solicitado is not None else "",
            f"{formatar_quantidade(r.disponivel)} {r.unidade or ''}".strip() if r.disponivel is not None else "",
            "[bold green]OK[/]" if r.valido else f"[bold red]{r.erro or 'insuficiente'}[/]",
        )
    console.print(table)
    if not ok:
        raise typer.Exit(code=2)


# -----------------------
# configuração
# -----------------------

config_app = typer.Typer(help="Configuração efetiva do ponto de venda.")
app.add_typer(config_app, name="config")


@config_app.command("show")
def cmd_config_show():
    """Exibe a configuração (defaults + variáveis de ambiente)."""
    _print_json({
        "api_url": API_URL,
        "logs_dir": str(LOGS_DIR),
        "timeout_segundos": DEFAULTS.timeout_segundos,
        "moeda": DEFAULTS.moeda,
        "taxa_cambio": DEFAULTS.taxa_cambio,
        "casas_dinheiro": DEFAULTS.casas_dinheiro,
        "casas_dose": DEFAULTS.casas_dose,
    })


# -----------------------
# venda interativa
# -----------------------

@app.command("vender")
def cmd_vender(api_url: str = typer.Option(API_URL, "--api", help="URL base do backend")):
    """Inicia a sessão interativa de venda."""
    with _api_factory(api_url) as api:
        try:
            main_tui(api)
        except KeyboardInterrupt:
            typer.echo("\nSaindo do ponto de venda...")
            raise typer.Exit(0)


@app.command("tui")
def cmd_tui(api_url: Optional[str] = typer.Option(None, "--api", help="URL base do backend")):
    """Atalho para `vender`."""
    cmd_vender(api_url or API_URL)


def main():
    app()


if __name__ == "__main__":
    main()
