from decimal import Decimal

import pytest

from vendas.domain.models import Inventario, Produto
from vendas.domain.policies import OrigemPreco, estoque_disponivel, preco_unitario


def _produto(**kw):
    base = dict(
        id="P1",
        nome="Meloxicam 2mg",
        categoria="medicamento",
        unidade="tableta",
        unidade_dose="dosis",
        doses_por_unidade=9,
        divisivel=True,
        preco_venda=10,
        preco_por_dose=2,
    )
    base.update(kw)
    return Produto(**base)


def test_estoque_por_unidade_e_por_dose():
    p = _produto()
    inv = Inventario(unidades=1, doses=3)
    assert estoque_disponivel(p, inv, True) == Decimal("1")
    assert estoque_disponivel(p, inv, False) == Decimal("12")


@pytest.mark.parametrize("unidades,doses,dpu", [(0, 0, 1), (5, 0, 10), (2, 7, 9), (0, 4, 3)])
def test_estoque_dose_segue_formula(unidades, doses, dpu):
    p = _produto(doses_por_unidade=dpu)
    inv = Inventario(unidades=unidades, doses=doses)
    assert estoque_disponivel(p, inv, True) == unidades
    assert estoque_disponivel(p, inv, False) == unidades * dpu + doses


def test_sem_inventario_retorna_zero():
    p = _produto()
    assert estoque_disponivel(p, None, True) == 0
    assert estoque_disponivel(p, None, False) == 0


def test_produto_nao_divisivel_nao_tem_estoque_em_dose():
    p = _produto(divisivel=False, preco_por_dose=None)
    assert estoque_disponivel(p, Inventario(unidades=4, doses=2), False) == 0


def test_preco_por_modo():
    p = _produto()
    assert preco_unitario(p, True).valor == Decimal("10.00")
    dose = preco_unitario(p, False)
    assert dose.valor == Decimal("2.00")
    assert dose.origem is OrigemPreco.RESOLVIDO


def test_preco_dose_ausente_e_marcado_como_fallback():
    p = _produto(preco_por_dose=None)
    preco = preco_unitario(p, False)
    assert preco.valor == Decimal("10.00")
    assert preco.fallback
    assert not preco_unitario(p, True).fallback


def test_preco_dose_zero_nao_e_fallback():
    preco = preco_unitario(_produto(preco_por_dose=0), False)
    assert preco.valor == Decimal("0.00")
    assert not preco.fallback


def test_invariantes_do_cadastro():
    with pytest.raises(ValueError):
        _produto(doses_por_unidade=0)
    with pytest.raises(ValueError):
        _produto(preco_venda=-1)
    with pytest.raises(ValueError):
        Inventario(unidades=-1)
