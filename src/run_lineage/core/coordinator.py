# src/run_lineage/core/coordinator.py
"""
RunCoordinator — orquestrador da captura de proveniência de uma run.

O coordenador é o único dono da Execution ativa e de sua tabela de
artefatos. Operações observadas chamam `intercept_output` (ou
`intercept_input`), que executa a operação real, resolve a identidade do
artefato, deduplica pelo caminho resolvido e registra a aresta
correspondente (wasGeneratedBy / used).

Ciclo de vida:
    - Criado explicitamente (`RunCoordinator(...)`) e passado por
      referência aos pontos de chamada, ou obtido de forma lazy como
      default do processo via `get_coordinator()`
    - `begin_run` descarta a run anterior em memória e cria uma nova
    - `end_run` marca o término (e o erro, se houver)
    - `close` encerra a run ativa e desativa o coordenador

Política de falhas:
    - A operação real sempre executa antes do rastreamento e seu
      resultado (ou exceção) nunca é alterado pelo rastreamento
    - `UnsupportedCallShape`, `PathResolutionFailure` e `NoActiveRun`
      viram diagnóstico (log WARNING + payload em `diagnostics`); com
      `strict=True` são relançadas após a operação real
    - `DuplicateIdentifierCollision` é sempre fatal

Concorrência:
    - Uma única trava reentrante protege a Execution ativa; a resolução
      de identidade e a mutação da tabela são atômicas entre chamadas
      interceptadas concorrentes
    - A operação real roda fora da trava
    - `intercept_output` e `intercept_input` executam a operação real
      dentro do bypass reentrante: operações observadas chamadas por ela
      não geram registros próprios
"""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from .call_shape import parse_input_shape, parse_output_shape, target_path
from .config.hashing import compute_config_hash
from .config.loader import load_config
from .config.settings import CaptureSettings, OUTPUT_POLICY_EVERY_WRITE
from .data_object import DataObject
from .environment import EnvironmentProbe
from .errors import TrackingErrorPayload, duplicate_identifier_collision, no_active_run
from .exceptions import DuplicateIdentifierCollision, NoActiveRun, RunLineageException
from .execution import Execution, new_identifier
from .formats import format_id_for
from .graph import ProvenanceGraph
from .identity import ArtifactIdentity
from .reentrancy import bypass, bypass_active


logger = logging.getLogger(__name__)

OUTPUT = "output"
INPUT = "input"


@dataclass(frozen=True)
class CaptureOutcome:
    """
    Resultado do rastreamento de uma chamada observada.

    status:
    - captured: artefato registrado (ver `is_new`)
    - skipped: captura desabilitada pela configuração
    - failed: rastreamento falhou; `error` descreve o motivo
    """

    status: str
    direction: str
    identifier: Optional[str] = None
    resolved_path: Optional[str] = None
    format_id: Optional[str] = None
    is_new: bool = False
    error: Optional[TrackingErrorPayload] = None

    @property
    def captured(self) -> bool:
        return self.status == "captured"


class RunCoordinator:
    """
    Orquestrador da run ativa.

    Args:
        settings: visão tipada da configuração; default `CaptureSettings()`.
        config_hash: hash da configuração de origem, gravado no pacote.
        probe: consultas de ambiente usadas ao criar Executions.
        id_factory: gerador de identificadores (Executions e DataObjects).
    """

    def __init__(
        self,
        settings: Optional[CaptureSettings] = None,
        *,
        config_hash: Optional[str] = None,
        probe: Optional[EnvironmentProbe] = None,
        id_factory: Callable[[], str] = new_identifier,
    ) -> None:
        self.settings = settings or CaptureSettings()
        self.config_hash = config_hash
        self.probe = probe
        self.id_factory = id_factory

        self.execution: Optional[Execution] = None
        self.events: List[Dict[str, Any]] = []
        self.diagnostics: List[TrackingErrorPayload] = []

        self._lock = threading.RLock()
        self._sequence = 0
        self._closed = False

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs: Any) -> "RunCoordinator":
        return cls(
            CaptureSettings.from_config(config),
            config_hash=compute_config_hash(config),
            **kwargs,
        )

    # -----------------------------
    # Flags
    # -----------------------------
    @property
    def capture_enabled(self) -> bool:
        return self.settings.capture_file_writes and not self._closed

    @property
    def input_capture_enabled(self) -> bool:
        return self.settings.capture_file_reads and not self._closed

    @property
    def debug(self) -> bool:
        return self.settings.debug

    @property
    def closed(self) -> bool:
        return self._closed

    # -----------------------------
    # Ciclo de vida da run
    # -----------------------------
    def begin_run(self, tag: str = "", *, software_application: Optional[str] = None) -> Execution:
        """Cria uma nova Execution, substituindo a anterior em memória."""
        with self._lock:
            self._sequence += 1
            self.execution = Execution.create(
                tag,
                software_application=software_application,
                sequence_number=self._sequence,
                probe=self.probe,
                defaults=self.settings.environment,
                id_factory=self.id_factory,
            )
            self.events = []
            self.diagnostics = []
            self._closed = False
            self.log("INFO", "run_started", tag=self.execution.tag)
            return self.execution

    def end_run(self, *, error: Optional[str] = None) -> Execution:
        """
        Marca o término da run ativa.

        Raises:
            NoActiveRun: Se nenhuma run foi iniciada.
        """
        with self._lock:
            execution = self._require_execution("end_run")
            if error is not None:
                execution.record_error(error)
            execution.mark_finished()
            self.log("ERROR" if error else "INFO", "run_finished", error=error)
            return execution

    @contextmanager
    def record(self, tag: str = "", *, software_application: Optional[str] = None) -> Iterator[Execution]:
        """Executa o bloco como uma run; exceções são registradas e relançadas."""
        execution = self.begin_run(tag, software_application=software_application)
        try:
            yield execution
        except BaseException as exc:
            self.end_run(error=f"{type(exc).__name__}: {exc}")
            raise
        else:
            self.end_run()

    def close(self) -> None:
        """Encerra a run ativa (se ainda aberta) e desativa a captura."""
        with self._lock:
            if self.execution is not None and not self.execution.end_time:
                self.end_run()
            self._closed = True

    def graph(self) -> ProvenanceGraph:
        with self._lock:
            return ProvenanceGraph.from_execution(self._require_execution("graph"))

    # -----------------------------
    # Interceptação
    # -----------------------------
    def intercept_output(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Executa uma operação de saída e registra o artefato produzido.

        O retorno é exatamente o da operação real.
        """
        if bypass_active() or not self.capture_enabled:
            return operation(*args, **kwargs)
        with bypass():
            result = operation(*args, **kwargs)
            self.record_output(args, operation=_name_of(operation))
        return result

    def intercept_input(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Executa uma operação de entrada e registra o artefato consumido."""
        if bypass_active() or not self.input_capture_enabled:
            return operation(*args, **kwargs)
        with bypass():
            result = operation(*args, **kwargs)
            self.record_input(args, operation=_name_of(operation))
        return result

    def record_output(self, args: Sequence[Any], *, operation: Optional[str] = None) -> CaptureOutcome:
        """Passos de rastreamento de saída: formato, identidade, dedup e aresta."""
        if not self.capture_enabled:
            return CaptureOutcome(status="skipped", direction=OUTPUT)
        return self._capture(OUTPUT, args, operation)

    def record_input(self, args: Sequence[Any], *, operation: Optional[str] = None) -> CaptureOutcome:
        if not self.input_capture_enabled:
            return CaptureOutcome(status="skipped", direction=INPUT)
        return self._capture(INPUT, args, operation)

    def _capture(self, direction: str, args: Sequence[Any], operation: Optional[str]) -> CaptureOutcome:
        try:
            with self._lock:
                return self._capture_locked(direction, args, operation)
        except DuplicateIdentifierCollision as exc:
            self._report(exc, operation)
            raise
        except RunLineageException as exc:
            payload = self._report(exc, operation)
            if self.settings.strict:
                raise
            return CaptureOutcome(status="failed", direction=direction, error=payload)

    def _capture_locked(self, direction: str, args: Sequence[Any], operation: Optional[str]) -> CaptureOutcome:
        execution = self._require_execution(operation)

        if direction == OUTPUT:
            shape = parse_output_shape(args, operation)
        else:
            shape = parse_input_shape(args, operation)

        identity = ArtifactIdentity.resolve(
            target_path(shape), search_paths=self.settings.search_paths
        )
        format_id = format_id_for(
            identity.extension,
            case_sensitive=self.settings.case_sensitive_formats,
            extra=self.settings.extra_formats,
        )

        identifier = execution.id_for_path(identity.resolved_path)
        is_new = identifier is None
        if identifier is None:
            identifier = self.id_factory()
            existing = execution.objects.get(identifier)
            if existing is not None:
                payload = duplicate_identifier_collision(
                    identifier=identifier,
                    existing_path=existing.resolved_path,
                    new_path=identity.resolved_path,
                )
                raise DuplicateIdentifierCollision.from_payload(payload)

        execution.objects[identifier] = DataObject(
            identifier=identifier,
            format_id=format_id,
            resolved_path=identity.resolved_path,
        )

        ids = execution.output_ids if direction == OUTPUT else execution.input_ids
        every_write = direction == OUTPUT and self.settings.output_ids_policy == OUTPUT_POLICY_EVERY_WRITE
        if every_write or identifier not in ids:
            ids.append(identifier)

        self.log(
            "INFO",
            f"{direction}_captured",
            identifier=identifier,
            resolved_path=identity.resolved_path,
            format_id=format_id,
            is_new=is_new,
            operation=operation,
        )
        if self.debug:
            logger.debug(
                "%s %s -> %s (%s, novo=%s)",
                direction, identity.raw_path, identifier, format_id, is_new,
            )

        return CaptureOutcome(
            status="captured",
            direction=direction,
            identifier=identifier,
            resolved_path=identity.resolved_path,
            format_id=format_id,
            is_new=is_new,
        )

    # -----------------------------
    # Logging & diagnósticos
    # -----------------------------
    def log(self, level: str, message: str, **extra: Any) -> None:
        event = {
            "execution_id": self.execution.execution_id if self.execution else None,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def _report(self, exc: RunLineageException, operation: Optional[str]) -> TrackingErrorPayload:
        payload = exc.to_payload()
        self.diagnostics.append(payload)
        level = logging.ERROR if payload.fatal else logging.WARNING
        logger.log(level, "Rastreamento ignorado em %s: %s", operation or "?", payload.message)
        self.log(logging.getLevelName(level), "tracking_failed", error=payload.to_dict())
        return payload

    def _require_execution(self, operation: Optional[str]) -> Execution:
        if self.execution is None:
            raise NoActiveRun.from_payload(no_active_run(operation=operation))
        return self.execution


def _name_of(operation: Callable[..., Any]) -> str:
    return getattr(operation, "__qualname__", None) or getattr(operation, "__name__", None) or repr(operation)


# ---------------------------------------------------------------------------
# Default do processo
# ---------------------------------------------------------------------------

_default_coordinator: Optional[RunCoordinator] = None
_default_lock = threading.Lock()


def get_coordinator() -> RunCoordinator:
    """Retorna o coordenador default do processo, criando-o no primeiro uso."""
    global _default_coordinator
    with _default_lock:
        if _default_coordinator is None:
            config = load_config(local_path=os.environ.get("RUN_LINEAGE_CONFIG"))
            _default_coordinator = RunCoordinator.from_config(config)
        return _default_coordinator


def set_coordinator(coordinator: Optional[RunCoordinator]) -> None:
    global _default_coordinator
    with _default_lock:
        _default_coordinator = coordinator


def reset_coordinator() -> None:
    """Encerra e descarta o coordenador default do processo."""
    global _default_coordinator
    with _default_lock:
        if _default_coordinator is not None:
            _default_coordinator.close()
        _default_coordinator = None
