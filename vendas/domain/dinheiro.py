"""
Numeric helpers for money and quantities.

Money and dose quantities are fixed-point values with two decimal places,
kept as ``Decimal`` so repeated multiplication by quantity never accumulates
binary floating point error. Whole-unit quantities are integers.

All functions are pure: they depend solely on their inputs and do not
modify any external state.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Union

from vendas.config import DEFAULTS

Numero = Union[int, float, str, Decimal]

CENTAVO = Decimal(10) ** -DEFAULTS.casas_dinheiro
PASSO_DOSE = Decimal(10) ** -DEFAULTS.casas_dose
ZERO = Decimal("0")


def para_decimal(valor: Numero) -> Decimal:
    """Convert ``valor`` to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` and not
    its binary expansion. Strings may use a comma as decimal separator.

    Raises
    ------
    ValueError
        If the value is ``None``, boolean, non-numeric or not finite.
    """
    if valor is None or isinstance(valor, bool):
        raise ValueError(f"valor numérico inválido: {valor!r}")
    if isinstance(valor, Decimal):
        d = valor
    else:
        texto = str(valor).strip().replace(",", ".")
        try:
            d = Decimal(texto)
        except InvalidOperation:
            raise ValueError(f"valor numérico inválido: {valor!r}") from None
    if not d.is_finite():
        raise ValueError(f"valor numérico inválido: {valor!r}")
    return d


def arredondar_dinheiro(valor: Numero) -> Decimal:
    """Quantize a money amount to cents (half up, like ``toFixed(2)``)."""
    return para_decimal(valor).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def normalizar_quantidade(valor: Numero, unidade_completa: bool) -> Decimal:
    """Apply the precision rule of the sale mode to a quantity.

    Whole units are truncated to an integer; doses keep two decimals.
    """
    d = para_decimal(valor)
    if unidade_completa:
        return d.quantize(Decimal("1"), rounding=ROUND_DOWN)
    return d.quantize(PASSO_DOSE, rounding=ROUND_HALF_UP)


def multiplicar(preco: Numero, quantidade: Numero) -> Decimal:
    """Line subtotal: ``preco * quantidade`` rounded to cents."""
    return arredondar_dinheiro(para_decimal(preco) * para_decimal(quantidade))


def converter_bs_para_usd(valor_bs: Numero, taxa: Numero) -> Decimal:
    """Convert bolívares to dollars at ``taxa`` Bs per USD."""
    t = para_decimal(taxa)
    if t <= 0:
        raise ValueError("taxa de câmbio deve ser maior que zero")
    return arredondar_dinheiro(para_decimal(valor_bs) / t)


def converter_usd_para_bs(valor_usd: Numero, taxa: Numero) -> Decimal:
    """Convert dollars to bolívares at ``taxa`` Bs per USD."""
    t = para_decimal(taxa)
    if t <= 0:
        raise ValueError("taxa de câmbio deve ser maior que zero")
    return arredondar_dinheiro(para_decimal(valor_usd) * t)


def formatar_moeda(valor: Numero, moeda: str = "USD") -> str:
    """Format an amount for display: ``$12.50`` or ``Bs. 455.00``."""
    v = arredondar_dinheiro(valor)
    if moeda.upper() == "USD":
        return f"${v}"
    return f"Bs. {v}"


def formatar_quantidade(valor: Numero) -> str:
    """Drop trailing zeros: ``Decimal("2.00")`` -> ``"2"``, ``0.50`` -> ``"0.5"``."""
    d = para_decimal(valor)
    if d == d.to_integral_value():
        return str(d.quantize(Decimal("1")))
    return format(d.normalize(), "f")
