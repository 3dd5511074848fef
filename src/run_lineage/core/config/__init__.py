# src/run_lineage/core/config/__init__.py
"""
Camada de configuração do Run Lineage.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar e identificar a configuração consultada pelo coordenador de
rastreamento (captura habilitada, debug, política de `output_ids`, busca
de nomes e fallbacks de ambiente).

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade
    - Visão tipada (`CaptureSettings`) consumida pelo coordenador

Limites explícitos:
    - Não lê variáveis de ambiente nem flags de CLI
    - Não interage com o coordenador diretamente
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config
from .merge import deep_merge
from .settings import (
    CaptureSettings,
    EnvironmentDefaults,
    OUTPUT_POLICY_EVERY_WRITE,
    OUTPUT_POLICY_FIRST_WRITE,
)

__all__ = [
    "CaptureSettings",
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "EnvironmentDefaults",
    "InvalidConfigRootTypeError",
    "OUTPUT_POLICY_EVERY_WRITE",
    "OUTPUT_POLICY_FIRST_WRITE",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_config",
]
