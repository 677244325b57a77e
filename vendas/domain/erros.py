"""
Taxonomia de erros e tipo de resultado das operações de venda.

Nenhuma operação do carrinho ou do checkout lança exceção por regra de
negócio: todas retornam um `Resultado`, que é sucesso (com valor) ou falha
(com um `ErroVenda`). A camada de apresentação decide como notificar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class TipoErro(str, Enum):
    SEM_ESTOQUE = "SEM_ESTOQUE"
    ESTOQUE_EXCEDIDO = "ESTOQUE_EXCEDIDO"
    CLIENTE_AUSENTE = "CLIENTE_AUSENTE"
    CARRINHO_VAZIO = "CARRINHO_VAZIO"
    TOTAL_ZERO = "TOTAL_ZERO"
    ERRO_REDE_OU_SERVIDOR = "ERRO_REDE_OU_SERVIDOR"
    DESCONTO_INVALIDO = "DESCONTO_INVALIDO"
    LINHA_INEXISTENTE = "LINHA_INEXISTENTE"
    PAGAMENTO_INVALIDO = "PAGAMENTO_INVALIDO"


@dataclass(frozen=True)
class ErroVenda:
    tipo: TipoErro
    mensagem: str
    detalhes: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.mensagem


@dataclass(frozen=True)
class Resultado(Generic[T]):
    """Sucesso (`valor`) ou falha (`erro`)."""
    valor: Optional[T] = None
    erro: Optional[ErroVenda] = None

    @property
    def ok(self) -> bool:
        return self.erro is None

    @property
    def tipo_erro(self) -> Optional[TipoErro]:
        return self.erro.tipo if self.erro else None

    @classmethod
    def sucesso(cls, valor: Optional[T] = None) -> "Resultado[T]":
        return cls(valor=valor)

    @classmethod
    def falha(cls, tipo: TipoErro, mensagem: str, **detalhes: Any) -> "Resultado[T]":
        return cls(erro=ErroVenda(tipo, mensagem, detalhes))
