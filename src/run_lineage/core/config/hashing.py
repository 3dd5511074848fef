# src/run_lineage/core/config/hashing.py
"""
Identidade da configuração usada em uma run.

O hash acompanha o data package exportado: duas runs com o mesmo hash
foram capturadas com exatamente as mesmas políticas.
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    SHA-256 (hex) do JSON canônico de `config`.

    Canônico: chaves ordenadas, separadores compactos, UTF-8 sem escapes.

    Raises:
        TypeError: Se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(f"compute_config_hash espera dict, recebido {type(config).__name__}")

    payload = json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
