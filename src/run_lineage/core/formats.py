# src/run_lineage/core/formats.py
"""
Classificação de conteúdo (`formatId`) a partir da extensão do arquivo.

A tabela base é fixa e cobre os formatos de imagem observados. Extensões
desconhecidas caem no classificador genérico `application/octet-stream`.

A comparação é sensível a maiúsculas por padrão: `out.PNG` não é
reconhecido como `image/png`. `case_sensitive=False` e o mapa `extra`
(vindos da configuração) ampliam a tabela sem alterá-la.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional


DEFAULT_FORMAT_ID = "application/octet-stream"

FORMAT_IDS: Mapping[str, str] = MappingProxyType(
    {
        "bmp": "image/bmp",
        "gif": "image/gif",
        "jp2": "image/jp2",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "tiff": "image/tiff",
    }
)


def format_id_for(
    extension: str,
    *,
    case_sensitive: bool = True,
    extra: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Retorna o media type associado a `extension` (com ou sem ponto).

    `extra` tem precedência sobre a tabela base.
    """
    ext = extension[1:] if extension.startswith(".") else extension
    table = dict(FORMAT_IDS)
    table.update(extra or {})

    if not case_sensitive:
        table = {k.lower(): v for k, v in table.items()}
        ext = ext.lower()

    return table.get(ext, DEFAULT_FORMAT_ID)
