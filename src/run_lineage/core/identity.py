# src/run_lineage/core/identity.py
"""
Identidade de artefatos — resolução de caminhos canônicos.

Este módulo converte o destino (ou origem) textual informado a uma
operação observada no caminho absoluto canônico usado como chave de
deduplicação dentro de uma execução.

Ordem de resolução:
    1. Caminho absoluto, ou relativo ao diretório de trabalho corrente,
       que exista como entrada consultável do filesystem (`os.stat`)
    2. Nome encontrado em um dos diretórios de busca configurados

O diretório corrente vem primeiro: um arquivo recém-escrito nunca é
confundido com um homônimo antigo em um diretório de busca.

Invariantes:
    - Caminhos resolvidos são absolutos, sem segmentos relativos e com
      symlinks resolvidos (`os.path.realpath`)
    - O mesmo arquivo produz a mesma string em chamadas sucessivas

Limites explícitos:
    - Não cria arquivos nem diretórios
    - Não normaliza maiúsculas/minúsculas em filesystems case-insensitive
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import path_resolution_failure
from .exceptions import PathResolutionFailure


PathLike = Union[str, "os.PathLike[str]"]


def canonical_path(path: PathLike) -> str:
    """Retorna a forma absoluta canônica de `path` (symlinks resolvidos)."""
    return os.path.realpath(os.path.abspath(os.fspath(path)))


def lookup_known_name(name: str, search_paths: Sequence[str] = ()) -> Optional[str]:
    """
    Procura `name` nos diretórios de busca (ou como caminho absoluto).

    Retorna o caminho canônico, ou None quando o nome não é conhecido.
    """
    if os.path.isabs(name):
        return canonical_path(name) if os.path.exists(name) else None

    for directory in search_paths:
        candidate = os.path.join(directory, name)
        if os.path.exists(candidate):
            return canonical_path(candidate)

    return None


@dataclass(frozen=True)
class ArtifactIdentity:
    """
    Valor imutável que identifica um artefato dentro de uma execução.

    Campos:
    - raw_path: texto original recebido pela operação observada
    - resolved_path: caminho canônico absoluto (chave de deduplicação)
    """

    raw_path: str
    resolved_path: str

    @property
    def extension(self) -> str:
        """Extensão do destino original, sem o ponto (ex.: `png`)."""
        return os.path.splitext(self.raw_path)[1][1:]

    @classmethod
    def resolve(
        cls,
        raw_path: str,
        *,
        search_paths: Sequence[str] = (),
        cwd: Optional[str] = None,
    ) -> "ArtifactIdentity":
        """
        Resolve `raw_path` para sua identidade canônica.

        Raises:
            PathResolutionFailure: Se o caminho não existir em nenhuma
                das etapas de resolução.
        """
        base = cwd if cwd is not None else os.getcwd()
        candidate = os.path.join(base, raw_path)
        try:
            os.stat(candidate)
        except OSError as exc:
            known = lookup_known_name(raw_path, search_paths)
            if known is not None:
                return cls(raw_path=raw_path, resolved_path=known)
            raise PathResolutionFailure.from_payload(
                path_resolution_failure(
                    raw_path=raw_path,
                    cwd=base,
                    search_paths=list(search_paths),
                    os_error=exc.strerror or exc.__class__.__name__,
                )
            ) from exc

        return cls(raw_path=raw_path, resolved_path=canonical_path(candidate))
