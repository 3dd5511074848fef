"""
Run Lineage — Canonical Tracking Error Structures (v1)

Este módulo define o padrão canônico de erros da camada de rastreamento.
Falhas de rastreamento são diagnósticos, não interrupções: o script
observado continua seu trabalho e o erro fica registrado de forma

- explícita
- serializável
- rastreável
- acionável
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, List


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrackingErrorPayload:
    """
    Payload canônico de erro de rastreamento.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    - fatal: indica se a falha invalida a identidade dos artefatos da run
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    fatal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

UNSUPPORTED_CALL_SHAPE = "UNSUPPORTED_CALL_SHAPE"
PATH_RESOLUTION_FAILURE = "PATH_RESOLUTION_FAILURE"
DUPLICATE_IDENTIFIER_COLLISION = "DUPLICATE_IDENTIFIER_COLLISION"
NO_ACTIVE_RUN = "NO_ACTIVE_RUN"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def unsupported_call_shape(
    *,
    operation: Optional[str],
    argument_types: List[str],
    textual_position: Optional[int] = None,
    hint: str = "Chame a operação como (data, destino, ...) ou (data, tabela, destino, ...) com o destino posicional em texto.",
) -> TrackingErrorPayload:
    return TrackingErrorPayload(
        type=UNSUPPORTED_CALL_SHAPE,
        message="Formato de chamada não suportado pelo rastreamento",
        details={
            "operation": operation,
            "argument_types": argument_types,
            "textual_position": textual_position,
        },
        hint=hint,
        fatal=False,
    )


def path_resolution_failure(
    *,
    raw_path: str,
    cwd: str,
    search_paths: List[str],
    os_error: Optional[str] = None,
    hint: str = "Verifique se o arquivo foi de fato criado pela operação e se o diretório de trabalho está correto.",
) -> TrackingErrorPayload:
    return TrackingErrorPayload(
        type=PATH_RESOLUTION_FAILURE,
        message="Caminho do artefato não pôde ser resolvido",
        details={
            "raw_path": raw_path,
            "cwd": cwd,
            "search_paths": search_paths,
            "os_error": os_error,
        },
        hint=hint,
        fatal=False,
    )


def duplicate_identifier_collision(
    *,
    identifier: str,
    existing_path: str,
    new_path: str,
    hint: str = "Verifique o gerador de identificadores; a run não deve ser publicada.",
) -> TrackingErrorPayload:
    return TrackingErrorPayload(
        type=DUPLICATE_IDENTIFIER_COLLISION,
        message="Identificador gerado já pertence a outro artefato da run",
        details={
            "identifier": identifier,
            "existing_path": existing_path,
            "new_path": new_path,
        },
        hint=hint,
        fatal=True,
    )


def no_active_run(
    *,
    operation: Optional[str],
    hint: str = "Inicie uma run com `begin_run` ou `record` antes de chamar operações observadas.",
) -> TrackingErrorPayload:
    return TrackingErrorPayload(
        type=NO_ACTIVE_RUN,
        message="Nenhuma execução ativa para registrar o artefato",
        details={"operation": operation},
        hint=hint,
        fatal=False,
    )
