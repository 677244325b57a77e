# vendas/config.py
"""
Configurações globais e valores padrão do ponto de venda.

Variáveis de ambiente (opcionais) sobrescrevem os padrões:
- VENDAS_API_URL    -> URL base do backend
- VENDAS_API_TOKEN  -> token Bearer enviado ao backend
- VENDAS_TIMEOUT    -> timeout HTTP em segundos
- VENDAS_LOGS_DIR   -> diretório dos arquivos de log
"""

import os
from dataclasses import dataclass
from pathlib import Path


# URL padrão do backend (REST/JSON)
API_URL = os.environ.get("VENDAS_API_URL", "http://localhost:4000/api")

# Token de acesso (opcional)
API_TOKEN = os.environ.get("VENDAS_API_TOKEN") or None

# Diretório padrão dos logs (ao lado do pacote)
LOGS_DIR = Path(os.environ.get("VENDAS_LOGS_DIR", Path(__file__).parent / "logs"))


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    timeout_segundos: float = float(os.environ.get("VENDAS_TIMEOUT", "30"))
    moeda: str = "USD"
    taxa_cambio: float = 1.0          # Bs por USD quando não informada
    casas_dinheiro: int = 2           # precisão monetária
    casas_dose: int = 2               # precisão de quantidades fracionadas


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
