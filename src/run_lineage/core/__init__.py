# src/run_lineage/core/__init__.py
"""
Core do Run Lineage.

Este pacote reúne o modelo de proveniência (Execution, DataObject,
ProvenanceGraph), a resolução de identidade de artefatos, o coordenador
da run e o mecanismo de interceptação.

O core é projetado para ser:
    - testável de forma isolada (ambiente e geradores injetáveis)
    - independente de formatos concretos de arquivo (ver `run_lineage.io`)
    - seguro para o script observado (falhas de captura são diagnósticos)
"""

from .call_shape import DirectRead, DirectWrite, IndexedWrite, parse_input_shape, parse_output_shape
from .config import CaptureSettings, load_config
from .coordinator import (
    INPUT,
    OUTPUT,
    CaptureOutcome,
    RunCoordinator,
    get_coordinator,
    reset_coordinator,
    set_coordinator,
)
from .data_object import DataObject
from .execution import Execution, format_timestamp, parse_timestamp
from .graph import USED, WAS_GENERATED_BY, ProvenanceEdge, ProvenanceGraph
from .identity import ArtifactIdentity, canonical_path
from .interception import Patch, install, patched, tracked_input, tracked_output

__all__ = [
    "ArtifactIdentity",
    "CaptureOutcome",
    "CaptureSettings",
    "DataObject",
    "DirectRead",
    "DirectWrite",
    "Execution",
    "INPUT",
    "IndexedWrite",
    "OUTPUT",
    "Patch",
    "ProvenanceEdge",
    "ProvenanceGraph",
    "RunCoordinator",
    "USED",
    "WAS_GENERATED_BY",
    "canonical_path",
    "format_timestamp",
    "get_coordinator",
    "install",
    "load_config",
    "parse_input_shape",
    "parse_output_shape",
    "parse_timestamp",
    "patched",
    "reset_coordinator",
    "set_coordinator",
    "tracked_input",
    "tracked_output",
]
