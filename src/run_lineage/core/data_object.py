# src/run_lineage/core/data_object.py
"""
DataObject — nó de proveniência para um artefato tocado em uma run.

Um DataObject é criado pelo coordenador na primeira observação de um
caminho resolvido. Observações seguintes do mesmo caminho reaproveitam o
identificador e substituem o registro (o formato pode ser atualizado).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DataObject:
    """
    Artefato (arquivo) associado a uma execução.

    Campos:
    - identifier: identificador único, atribuído no primeiro registro
    - format_id: classificador de conteúdo (media type)
    - resolved_path: caminho canônico usado na comparação de identidade
    """

    identifier: str
    format_id: str
    resolved_path: str

    @property
    def file_name(self) -> str:
        return os.path.basename(self.resolved_path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "format_id": self.format_id,
            "resolved_path": self.resolved_path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataObject":
        return cls(
            identifier=str(data["identifier"]),
            format_id=str(data["format_id"]),
            resolved_path=str(data["resolved_path"]),
        )
