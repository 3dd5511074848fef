# src/run_lineage/core/config/merge.py
"""
Deep-merge dos overrides locais sobre os defaults.

Regras por par (valor base, valor override):
    - mapa + mapa      → merge recursivo
    - lista + lista    → a lista do override substitui a da base
    - None em um lado  → o override vence (permite limpar uma chave)
    - mesmo tipo       → o override vence
    - tipos diferentes → ConfigTypeConflictError, com o caminho da chave

Nenhum dos argumentos é alterado.
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def _merge_value(base: Any, override: Any, path: Tuple[str, ...]) -> Any:
    if isinstance(base, dict) and isinstance(override, dict):
        return _merge_dicts(base, override, path)

    if base is None or override is None or type(base) is type(override):
        return deepcopy(override)

    raise ConfigTypeConflictError(
        f"Conflito de tipo em '{'.'.join(path)}': "
        f"{type(base).__name__} (defaults) vs {type(override).__name__} (override)"
    )


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any], path: Tuple[str, ...]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if key in merged:
            merged[key] = _merge_value(merged[key], value, path + (str(key),))
        else:
            merged[key] = deepcopy(value)
    return merged


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Retorna um novo dicionário com `override` aplicado sobre `base`.

    Raises:
        ConfigTypeConflictError: Se algum argumento não for dict, ou se uma
            mesma chave tiver tipos incompatíveis nos dois lados.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"deep_merge espera dois dicts, recebido "
            f"{type(base).__name__} e {type(override).__name__}"
        )
    return _merge_dicts(base, override, ())
