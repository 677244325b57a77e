# vendas/infra/logger.py
"""
Sistema de logging do ponto de venda.

Este módulo configura e fornece loggers para registrar as operações do
carrinho, as tentativas de checkout, as chamadas HTTP ao backend e os
eventos gerais do sistema.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from vendas.config import LOGS_DIR


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = os.environ.get("VENDAS_LOG", "0").strip().lower() in {"1", "true", "sim", "yes"}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILES = {
    "carrinho": "carrinho.log",
    "checkout": "checkout.log",
    "api": "api.log",
    "system": "system.log",
}


def setup_logger(name: str, log_file: Path, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger com saída em arquivo.

    O arquivo só é aberto na primeira mensagem emitida (``delay=True``),
    então importar o módulo não cria arquivos.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    class _LazyDirFileHandler(logging.FileHandler):
        def _open(self):
            Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
            return super()._open()

    file_handler = _LazyDirFileHandler(str(log_file), encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)
    return logger


carrinho_logger = setup_logger('vendas.carrinho', LOGS_DIR / LOG_FILES["carrinho"])
checkout_logger = setup_logger('vendas.checkout', LOGS_DIR / LOG_FILES["checkout"])
api_logger = setup_logger('vendas.api', LOGS_DIR / LOG_FILES["api"])
system_logger = setup_logger('vendas.system', LOGS_DIR / LOG_FILES["system"])


def log_carrinho(action: str, produto_id: str, unidade_completa: Optional[bool] = None,
                 error: Optional[str] = None, **kwargs) -> None:
    """
    Log de mutações do carrinho.

    Args:
        action: Operação (add, update, toggle, remove, discount)
        produto_id: Produto afetado
        unidade_completa: Modo da linha (opcional)
        error: Mensagem de falha, se a operação foi recusada
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "produto_id": produto_id, "unidade_completa": unidade_completa, **kwargs}
    if error:
        carrinho_logger.warning(f"CARRINHO_{action.upper()}_RECUSADO: {error} - {log_data}")
    else:
        carrinho_logger.info(f"CARRINHO_{action.upper()}: {log_data}")


def log_checkout(operation: str, data: Dict[str, Any], result: Optional[Any] = None,
                 error: Optional[str] = None) -> None:
    """Registra uma tentativa de checkout (montagem, envio, resposta)."""
    if not ENABLE_LOGGING:
        return
    if error:
        checkout_logger.error(f"CHECKOUT_FAILED: {operation} - {error} - Data: {data}")
    else:
        checkout_logger.info(f"CHECKOUT_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_api(method: str, path: str, status: Optional[int] = None, error: Optional[str] = None, **kwargs) -> None:
    """Log das chamadas HTTP ao backend."""
    if not ENABLE_LOGGING:
        return
    log_data = {"method": method, "path": path, "status": status, **kwargs}
    if error:
        api_logger.error(f"HTTP_{method.upper()}_ERROR: {error} - {log_data}")
    else:
        api_logger.info(f"HTTP_{method.upper()}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not ENABLE_LOGGING:
        return
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {details or {}}")


def get_log_summary(log_type: str = "checkout", lines: int = 100) -> str:
    """
    Obtém as linhas mais recentes de um log.

    Args:
        log_type: carrinho, checkout, api ou system
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    nome = LOG_FILES.get(log_type)
    if not nome:
        return f"Log {log_type} não encontrado."
    log_file = LOGS_DIR / nome
    if not log_file.exists():
        return f"Log {log_type} não encontrado."
    with open(log_file, 'r', encoding='utf-8') as f:
        all_lines = f.readlines()
    return ''.join(all_lines[-lines:])
