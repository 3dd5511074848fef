# src/run_lineage/core/execution.py
"""
Execution — metadados de uma execução (run) de script observada.

Uma Execution identifica unicamente a run, registra seu ambiente, seus
timestamps e a tabela de artefatos tocados durante a execução. Ela é o
nó de atividade do grafo de proveniência.

Decisões arquiteturais:
    - Identificadores são URNs sobre UUID4 (128 bits aleatórios)
    - Timestamps preservam o offset de timezone local explicitamente
      (`2026-10-17 19:37:01.123-0300`), com precisão de milissegundos
    - A construção nunca falha: todo descritor de ambiente tem fallback

Invariantes:
    - `execution_id`, `data_package_id`, `start_time` e os descritores de
      ambiente são atribuídos uma única vez, na construção
    - `error_message` e `publish_time` são atribuídos no máximo uma vez
    - `objects` nunca contém dois DataObjects com o mesmo `resolved_path`
    - `output_ids` e `input_ids` referenciam apenas chaves de `objects`

Limites explícitos:
    - Não resolve caminhos nem gera DataObjects (ver coordenador)
    - Não serializa em formato de arquivo padrão (PROV/ORE)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .config.settings import EnvironmentDefaults
from .data_object import DataObject
from .environment import EnvironmentProbe, capture_environment


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f%z"

_FROZEN_FIELDS = frozenset(
    {
        "execution_id",
        "data_package_id",
        "start_time",
        "account_name",
        "host_id",
        "runtime",
        "operating_system",
        "software_application",
        "module_dependencies",
    }
)


def new_identifier() -> str:
    """Gera um identificador opaco `urn:uuid:<uuid4>`."""
    return f"urn:uuid:{uuid.uuid4()}"


def format_timestamp(dt: datetime) -> str:
    """
    Formata `dt` com milissegundos e offset explícito (`+HHMM`).

    Timestamps timezone-naive são interpretados como horário local.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return f"{dt.strftime('%Y-%m-%d %H:%M:%S')}.{dt.microsecond // 1000:03d}{dt.strftime('%z')}"


def parse_timestamp(value: str) -> datetime:
    """Inverso de `format_timestamp`; o resultado é timezone-aware."""
    return datetime.strptime(value, TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return format_timestamp(datetime.now().astimezone())


@dataclass
class Execution:
    """
    Registro de uma execução observada.

    Use `Execution.create()` para uma nova run; o construtor direto existe
    para reconstrução (`from_dict`) e testes.
    """

    execution_id: str
    data_package_id: str
    start_time: str
    tag: str = ""
    sequence_number: Optional[int] = None
    end_time: str = ""
    publish_time: str = ""
    account_name: str = ""
    host_id: str = "localhost"
    runtime: str = ""
    operating_system: str = ""
    software_application: str = ""
    module_dependencies: str = ""
    error_message: Optional[str] = None
    objects: Dict[str, DataObject] = field(default_factory=dict)
    output_ids: List[str] = field(default_factory=list)
    input_ids: List[str] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _FROZEN_FIELDS and name in self.__dict__:
            raise AttributeError(f"'{name}' é imutável após a construção da Execution")
        object.__setattr__(self, name, value)

    # -----------------------------
    # Construção
    # -----------------------------
    @classmethod
    def create(
        cls,
        tag: str = "",
        *,
        software_application: Optional[str] = None,
        sequence_number: Optional[int] = None,
        probe: Optional[EnvironmentProbe] = None,
        defaults: Optional[EnvironmentDefaults] = None,
        id_factory: Callable[[], str] = new_identifier,
        clock: Callable[[], str] = now_timestamp,
    ) -> "Execution":
        """
        Cria uma Execution populando todos os descritores de ambiente.

        Args:
            tag: rótulo curto opcional da run.
            software_application: nome do script informado pelo chamador;
                quando omitido, é descoberto no ambiente.
            sequence_number: ordinal da run na sessão.
            probe / defaults: consultas e fallbacks de ambiente.
            id_factory / clock: geradores injetáveis (testes).
        """
        env = capture_environment(probe, defaults)
        if software_application:
            env["software_application"] = software_application

        return cls(
            execution_id=id_factory(),
            data_package_id=id_factory(),
            start_time=clock(),
            tag=tag or "",
            sequence_number=sequence_number,
            **env,
        )

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    def mark_finished(self, ts: Optional[str] = None) -> None:
        self.end_time = ts or now_timestamp()

    def mark_published(self, ts: Optional[str] = None) -> bool:
        """Registra o instante de publicação; retorna False se já publicado."""
        if self.publish_time:
            return False
        self.publish_time = ts or now_timestamp()
        return True

    def record_error(self, message: str) -> bool:
        """Registra a mensagem de término anormal; apenas a primeira vale."""
        if self.error_message is not None:
            return False
        self.error_message = message
        return True

    # -----------------------------
    # Tabela de artefatos
    # -----------------------------
    def id_for_path(self, resolved_path: str) -> Optional[str]:
        """Identificador do artefato com este caminho resolvido, se houver."""
        for identifier, obj in self.objects.items():
            if obj.resolved_path == resolved_path:
                return identifier
        return None

    # -----------------------------
    # Serialização
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "execution_id": self.execution_id,
            "data_package_id": self.data_package_id,
            "tag": self.tag,
            "sequence_number": self.sequence_number,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "publish_time": self.publish_time,
            "account_name": self.account_name,
            "host_id": self.host_id,
            "runtime": self.runtime,
            "operating_system": self.operating_system,
            "software_application": self.software_application,
            "module_dependencies": self.module_dependencies,
            "error_message": self.error_message,
            "objects": {k: v.to_dict() for k, v in self.objects.items()},
            "output_ids": list(self.output_ids),
            "input_ids": list(self.input_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Execution":
        return cls(
            execution_id=str(data["execution_id"]),
            data_package_id=str(data["data_package_id"]),
            start_time=str(data["start_time"]),
            tag=data.get("tag", "") or "",
            sequence_number=data.get("sequence_number"),
            end_time=data.get("end_time", "") or "",
            publish_time=data.get("publish_time", "") or "",
            account_name=data.get("account_name", "") or "",
            host_id=data.get("host_id") or "localhost",
            runtime=data.get("runtime", "") or "",
            operating_system=data.get("operating_system", "") or "",
            software_application=data.get("software_application", "") or "",
            module_dependencies=data.get("module_dependencies", "") or "",
            error_message=data.get("error_message"),
            objects={
                k: DataObject.from_dict(v) for k, v in (data.get("objects", {}) or {}).items()
            },
            output_ids=list(data.get("output_ids", []) or []),
            input_ids=list(data.get("input_ids", []) or []),
        )
