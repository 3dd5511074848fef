# src/run_lineage/__init__.py
"""
Run Lineage — captura de proveniência de execuções de scripts.

Este pacote registra, para uma run de um script computacional, quais
artefatos foram lidos, quais foram produzidos e como se relacionam,
permitindo reconstruir o grafo de linhagem (o "data package") após o
término da execução.

Princípios centrais:
    - A captura é não invasiva: o script observado não chama uma API de
      log; as operações de I/O são interceptadas
    - Um artefato lógico tem um único identificador durante a run,
      independentemente de quantas vezes é escrito
    - Falhas de rastreamento nunca interrompem o trabalho do script

Arquitetura em alto nível:
    - core.execution    → metadados da run e ambiente
    - core.coordinator  → run ativa, deduplicação e arestas
    - core.interception → hooks, bypass reentrante e patches
    - core.graph        → nós e arestas derivados para exportação
    - core.traceability → snapshot JSON da run
    - io                → operações de imagem e pandas observáveis
"""

from .core import (
    ArtifactIdentity,
    CaptureOutcome,
    CaptureSettings,
    DataObject,
    Execution,
    ProvenanceGraph,
    RunCoordinator,
    get_coordinator,
    reset_coordinator,
    set_coordinator,
    tracked_input,
    tracked_output,
)

__version__ = "0.1.0"

__all__ = [
    "ArtifactIdentity",
    "CaptureOutcome",
    "CaptureSettings",
    "DataObject",
    "Execution",
    "ProvenanceGraph",
    "RunCoordinator",
    "__version__",
    "get_coordinator",
    "reset_coordinator",
    "set_coordinator",
    "tracked_input",
    "tracked_output",
]
