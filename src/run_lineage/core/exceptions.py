"""
Run Lineage — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas da camada de rastreamento.

Objetivo:
- Permitir que identidade, parsing de chamada e coordenador levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para TrackingErrorPayload
- Evitar ValueError/RuntimeError genéricos no caminho de captura

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Apenas `DuplicateIdentifierCollision` é fatal para a run.
- Não usar `frozen=True`: `contextlib` reatribui `__traceback__` ao
  relançar exceções que atravessam `record()` e `bypass()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import (
    TrackingErrorPayload,
    DUPLICATE_IDENTIFIER_COLLISION,
    NO_ACTIVE_RUN,
    PATH_RESOLUTION_FAILURE,
    UNSUPPORTED_CALL_SHAPE,
)


@dataclass(eq=False)
class RunLineageException(Exception):
    """Base class para exceções internas do rastreamento.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    error_type = "RUN_LINEAGE_ERROR"
    fatal = False

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @classmethod
    def from_payload(cls, payload: TrackingErrorPayload) -> "RunLineageException":
        return cls(message=payload.message, details=dict(payload.details), hint=payload.hint)

    def to_payload(self) -> TrackingErrorPayload:
        return TrackingErrorPayload(
            type=self.error_type,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
            fatal=self.fatal,
        )


@dataclass(eq=False)
class UnsupportedCallShape(RunLineageException):
    """Nenhum argumento textual de destino em posição suportada."""

    error_type = UNSUPPORTED_CALL_SHAPE


@dataclass(eq=False)
class PathResolutionFailure(RunLineageException):
    """O destino não corresponde a uma entrada existente do filesystem."""

    error_type = PATH_RESOLUTION_FAILURE


@dataclass(eq=False)
class DuplicateIdentifierCollision(RunLineageException):
    """Identificador recém-gerado já pertence a outro artefato."""

    error_type = DUPLICATE_IDENTIFIER_COLLISION
    fatal = True


@dataclass(eq=False)
class NoActiveRun(RunLineageException):
    """Captura solicitada sem execução ativa no coordenador."""

    error_type = NO_ACTIVE_RUN
