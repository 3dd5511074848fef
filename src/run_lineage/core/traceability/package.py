# src/run_lineage/core/traceability/package.py
"""
Data package v1 — snapshot persistível de uma run.

O data package consolida, de forma determinística e auditável:
    - metadados da execução (ids, timestamps, ambiente)
    - tabela de DataObjects e listas de entradas/saídas
    - arestas derivadas (used / wasGeneratedBy)
    - hash da configuração usada na captura
    - Event Log e diagnósticos do coordenador

Decisões arquiteturais:
    - O formato de persistência é JSON determinístico (`sort_keys=True`)
    - As arestas são gravadas para inspeção, mas recalculadas na leitura
      a partir da Execution (o grafo não é estado independente)

Invariantes:
    - `load_data_package(save_data_package(p))` reconstrói uma Execution
      equivalente à original (round-trip)

Limites explícitos:
    - Não realiza migração de versões de schema
    - Não copia o conteúdo dos artefatos
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..coordinator import RunCoordinator
from ..errors import no_active_run
from ..exceptions import NoActiveRun
from ..execution import Execution
from ..graph import ProvenanceGraph


SCHEMA_VERSION = "1"


@dataclass
class DataPackage:
    """
    Snapshot de uma run.

    Campos principais:
        - execution: Execution completa (inclui `objects`, `output_ids`, `input_ids`)
        - config_hash: hash da configuração efetiva, quando conhecido
        - events: Event Log ordenado do coordenador
        - diagnostics: payloads de falhas de rastreamento
    """

    execution: Execution
    config_hash: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    diagnostics: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def graph(self) -> ProvenanceGraph:
        return ProvenanceGraph.from_execution(self.execution)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "execution": self.execution.to_dict(),
            "edges": [e.to_dict() for e in self.graph.edges],
            "inputs": {"config_hash": self.config_hash},
            "events": [dict(e) for e in self.events],
            "diagnostics": [dict(d) for d in self.diagnostics],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataPackage":
        """
        Reconstrói o pacote a partir de sua forma serializada.

        Campos ausentes são inicializados com valores vazios; `edges` é
        ignorado (derivado de `execution`).
        """
        return cls(
            execution=Execution.from_dict(data["execution"]),
            config_hash=(data.get("inputs", {}) or {}).get("config_hash"),
            events=[dict(e) for e in (data.get("events", []) or [])],
            diagnostics=[dict(d) for d in (data.get("diagnostics", []) or [])],
        )


def build_data_package(coordinator: RunCoordinator) -> DataPackage:
    """
    Captura o estado atual da run ativa do coordenador.

    Raises:
        NoActiveRun: Se o coordenador não tiver execução.
    """
    if coordinator.execution is None:
        raise NoActiveRun.from_payload(no_active_run(operation="build_data_package"))
    return DataPackage(
        execution=Execution.from_dict(coordinator.execution.to_dict()),
        config_hash=coordinator.config_hash,
        events=[dict(e) for e in coordinator.events],
        diagnostics=[d.to_dict() for d in coordinator.diagnostics],
    )


def save_data_package(package: Union[DataPackage, RunCoordinator], path: Path) -> Path:
    """
    Persiste o pacote em JSON; diretórios intermediários são criados.

    Aceita um `DataPackage` ou diretamente o coordenador.

    Raises:
        OSError: Em caso de falha ao criar diretórios ou escrever o arquivo.
    """
    if isinstance(package, RunCoordinator):
        package = build_data_package(package)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(package.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return path


def load_data_package(path: Path) -> DataPackage:
    """
    Carrega um pacote persistido.

    Raises:
        OSError: Em caso de falha de leitura do arquivo.
        json.JSONDecodeError: Em caso de JSON inválido.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return DataPackage.from_dict(data)
