from vendas.infra import logger


def test_log_checkout_grava_e_resumo_le(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger, "LOGS_DIR", tmp_path)
    monkeypatch.setattr(
        logger, "checkout_logger",
        logger.setup_logger("vendas.checkout.teste", tmp_path / logger.LOG_FILES["checkout"]),
    )

    logger.log_checkout("enviar", {"cliente_id": "OW1"}, result={"venda_id": "S1"})
    logger.log_checkout("enviar", {"cliente_id": "OW1"}, error="Stock insuficiente")

    resumo = logger.get_log_summary("checkout")
    assert "CHECKOUT_SUCCESS: enviar" in resumo
    assert "CHECKOUT_FAILED: enviar - Stock insuficiente" in resumo
    assert logger.get_log_summary("checkout", lines=1).count("\n") == 1


def test_logging_desligado_nao_cria_arquivo(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logger, "LOGS_DIR", tmp_path)
    logger.log_system_event("inicio")
    assert list(tmp_path.iterdir()) == []
    assert logger.get_log_summary("system") == "Log system não encontrado."
    assert logger.get_log_summary("outro") == "Log outro não encontrado."
