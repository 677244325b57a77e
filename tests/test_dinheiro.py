from decimal import Decimal

import pytest

from vendas.domain.dinheiro import (
    arredondar_dinheiro,
    converter_bs_para_usd,
    converter_usd_para_bs,
    formatar_moeda,
    formatar_quantidade,
    multiplicar,
    normalizar_quantidade,
    para_decimal,
)


@pytest.mark.parametrize(
    "valor,esperado",
    [
        (10, Decimal("10")),
        (0.1, Decimal("0.1")),
        ("2,5", Decimal("2.5")),
        (" 3.75 ", Decimal("3.75")),
        (Decimal("1.5"), Decimal("1.5")),
    ],
)
def test_para_decimal(valor, esperado):
    assert para_decimal(valor) == esperado


@pytest.mark.parametrize("valor", [None, True, "abc", "", "nan", "inf"])
def test_para_decimal_invalido(valor):
    with pytest.raises(ValueError):
        para_decimal(valor)


def test_arredondar_dinheiro_half_up():
    assert arredondar_dinheiro("2.675") == Decimal("2.68")
    assert arredondar_dinheiro("2.674") == Decimal("2.67")
    assert arredondar_dinheiro(10) == Decimal("10.00")


def test_soma_repetida_nao_acumula_erro():
    # 0.1 * 3 em float dá 0.30000000000000004
    assert multiplicar(0.1, 3) == Decimal("0.30")
    total = sum((multiplicar("0.10", 1) for _ in range(10)), Decimal("0"))
    assert total == Decimal("1.00")


def test_normalizar_quantidade_por_modo():
    assert normalizar_quantidade("2.9", unidade_completa=True) == Decimal("2")
    assert normalizar_quantidade("0.5", unidade_completa=True) == Decimal("0")
    assert normalizar_quantidade("0.505", unidade_completa=False) == Decimal("0.51")
    assert normalizar_quantidade("1,25", unidade_completa=False) == Decimal("1.25")


def test_conversao_de_moeda():
    assert converter_usd_para_bs(10, "36.5") == Decimal("365.00")
    assert converter_bs_para_usd(365, "36.5") == Decimal("10.00")
    with pytest.raises(ValueError):
        converter_bs_para_usd(100, 0)


def test_formatacao():
    assert formatar_moeda(12.5) == "$12.50"
    assert formatar_moeda(455, "Bs") == "Bs. 455.00"
    assert formatar_quantidade(Decimal("2.00")) == "2"
    assert formatar_quantidade(Decimal("0.50")) == "0.5"
