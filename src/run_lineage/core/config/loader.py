# src/run_lineage/core/config/loader.py
"""
Leitura da configuração do rastreamento.

Duas camadas, aplicadas nesta ordem:
    1. defaults: o `defaults.yaml` distribuído com o pacote, ou um
       arquivo informado explicitamente
    2. local: overrides opcionais do usuário, mesclados com `deep_merge`

O parser é escolhido pela extensão (`.yaml`, `.yml`, `.json`). Um
arquivo vazio vale como mapa vazio.

Este módulo não consulta variáveis de ambiente; quem decide qual arquivo
local usar é o chamador (ver `coordinator.get_coordinator`).
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, IO, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")

_PARSERS: Dict[str, Callable[[IO[str]], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def _read_mapping(path: Path) -> Dict[str, Any]:
    """
    Lê `path` e exige um mapa na raiz.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não tiver parser.
        InvalidConfigRootTypeError: Se a raiz não for um mapa.
    """
    if not path.is_file():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '(sem extensão)'} "
            f"(aceitos: {', '.join(sorted(_PARSERS))})"
        )

    with path.open("r", encoding="utf-8") as handle:
        content = parser(handle)

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise InvalidConfigRootTypeError(
            f"{path.name}: raiz deve ser um mapa, recebido {type(content).__name__}"
        )
    return content


def load_config(
    *,
    defaults_path: Optional[Union[str, Path]] = None,
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Resolve a configuração efetiva (defaults + local).

    Args:
        defaults_path: arquivo base; None usa o `defaults.yaml` empacotado.
        local_path: overrides; ignorado quando o arquivo não existe.

    Returns:
        Novo dicionário; os arquivos de origem não são reutilizados.

    Raises:
        DefaultsNotFoundError: Se o defaults explícito não existir.
        UnsupportedConfigFormatError / InvalidConfigRootTypeError: ver `_read_mapping`.
        ConfigTypeConflictError: Se o override conflitar com o tipo do defaults.
    """
    base = _read_mapping(Path(defaults_path) if defaults_path is not None else PACKAGED_DEFAULTS)

    if local_path is None or not Path(local_path).is_file():
        return base
    return deep_merge(base, _read_mapping(Path(local_path)))
