from decimal import Decimal

import pytest

from vendas.adapters.parsers import (
    cliente_from_json,
    parse_numero,
    produto_from_json,
    resposta_venda_from_json,
    validacao_from_json,
)


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("5", Decimal("5")),
        ("2,5 ml", Decimal("2.5")),
        ("$ 10.00", Decimal("10.00")),
        (3, Decimal("3")),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_numero(txt, esperado):
    assert parse_numero(txt) == esperado


def test_produto_com_inventario():
    item = produto_from_json({
        "_id": "p1",
        "name": "Meloxicam 2mg",
        "category": "medicamento",
        "unit": "tableta",
        "doseUnit": "dosis",
        "dosesPerUnit": 9,
        "divisible": True,
        "salePrice": 10,
        "salePricePerDose": 2,
        "inventory": {"stockUnits": 1, "stockDoses": 3},
    })
    assert item.id == "p1"
    assert item.produto.divisivel is True
    assert item.produto.preco_por_dose == Decimal("2.00")
    assert item.total_doses == 12
    assert item.tem_estoque


def test_produto_sem_inventario_e_sem_preco_dose():
    item = produto_from_json({"_id": "p2", "name": "Collar", "category": "accesorio", "salePrice": 4.5})
    assert item.inventario is None
    assert item.produto.preco_por_dose is None
    assert item.produto.doses_por_unidade == 1
    assert not item.tem_estoque


def test_produto_sem_id():
    with pytest.raises(ValueError):
        produto_from_json({"name": "X"})


def test_cliente_resposta_e_validacao():
    c = cliente_from_json({"_id": "o1", "name": "Ana", "contact": "0414", "creditBalance": 12.5})
    assert c.saldo_credito == Decimal("12.50")
    assert c.telefone == "0414"

    r = resposta_venda_from_json({
        "msg": "Venta creada", "sale": {"_id": "s1"}, "invoiceId": "i1",
        "paymentsCreated": 1, "changeAmount": 1.6,
    })
    assert r.venda_id == "s1"
    assert r.troco == Decimal("1.6")

    v = validacao_from_json({"productId": "p1", "valid": False, "available": 2, "requested": 3, "error": "Stock insuficiente"})
    assert not v.valido
    assert v.disponivel == 2
