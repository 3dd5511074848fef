# src/run_lineage/core/config/settings.py
"""
Visão tipada da configuração consultada pelo coordenador.

O coordenador não lê dicionários crus: ele recebe um `CaptureSettings`
imutável, construído a partir da configuração resolvida. Valores
ausentes assumem os mesmos defaults do `defaults.yaml` empacotado, de
modo que `CaptureSettings()` é sempre uma configuração válida.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError


OUTPUT_POLICY_FIRST_WRITE = "first_write"
OUTPUT_POLICY_EVERY_WRITE = "every_write"
_OUTPUT_POLICIES = (OUTPUT_POLICY_FIRST_WRITE, OUTPUT_POLICY_EVERY_WRITE)


@dataclass(frozen=True)
class EnvironmentDefaults:
    """Valores usados quando uma consulta ao ambiente falha ou retorna vazio."""

    host_id: str = "localhost"
    account_name: str = ""
    runtime: str = ""
    operating_system: str = ""
    software_application: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "EnvironmentDefaults":
        data = data or {}
        base = cls()
        return cls(
            host_id=str(data.get("host_id", base.host_id) or base.host_id),
            account_name=str(data.get("account_name", base.account_name) or ""),
            runtime=str(data.get("runtime", base.runtime) or ""),
            operating_system=str(data.get("operating_system", base.operating_system) or ""),
            software_application=str(
                data.get("software_application", base.software_application) or ""
            ),
        )


@dataclass(frozen=True)
class CaptureSettings:
    """
    Configuração efetiva do rastreamento.

    Campos:
    - capture_file_writes: flag de captura de saídas (wasGeneratedBy)
    - capture_file_reads: flag de captura de entradas (used)
    - debug: diagnósticos verbosos em cada chamada interceptada
    - output_ids_policy: `first_write` ou `every_write`
    - strict: relança falhas de rastreamento após a operação real
    - search_paths: diretórios consultados antes do diretório corrente
    - case_sensitive_formats / extra_formats: tabela de media types
    - environment: fallbacks explícitos das consultas ao ambiente
    """

    capture_file_writes: bool = True
    capture_file_reads: bool = True
    debug: bool = False
    output_ids_policy: str = OUTPUT_POLICY_FIRST_WRITE
    strict: bool = False
    search_paths: Tuple[str, ...] = ()
    case_sensitive_formats: bool = True
    extra_formats: Dict[str, str] = field(default_factory=dict)
    environment: EnvironmentDefaults = field(default_factory=EnvironmentDefaults)

    def __post_init__(self) -> None:
        if self.output_ids_policy not in _OUTPUT_POLICIES:
            raise ConfigError(
                f"output_ids_policy inválida: {self.output_ids_policy!r} "
                f"(esperado: {', '.join(_OUTPUT_POLICIES)})"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CaptureSettings":
        """
        Constrói a visão tipada a partir da configuração resolvida.

        Raises:
            ConfigError: Se uma seção tiver tipo inválido ou a política
                de `output_ids` for desconhecida.
        """
        capture = _section(config, "capture")
        lookup = _section(config, "lookup")
        formats = _section(config, "formats")

        search_paths = lookup.get("search_paths") or []
        if not isinstance(search_paths, (list, tuple)):
            raise ConfigError("lookup.search_paths deve ser uma lista de diretórios")

        extra = formats.get("extra") or {}
        if not isinstance(extra, dict):
            raise ConfigError("formats.extra deve ser um mapa extensão -> media type")

        return cls(
            capture_file_writes=bool(capture.get("file_writes", True)),
            capture_file_reads=bool(capture.get("file_reads", True)),
            debug=bool(config.get("debug", False)),
            output_ids_policy=str(capture.get("output_ids_policy", OUTPUT_POLICY_FIRST_WRITE)),
            strict=bool(capture.get("strict", False)),
            search_paths=tuple(str(p) for p in search_paths),
            case_sensitive_formats=bool(formats.get("case_sensitive", True)),
            extra_formats={str(k): str(v) for k, v in extra.items()},
            environment=EnvironmentDefaults.from_dict(_section(config, "environment")),
        )


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Seção '{name}' deve ser um mapa, recebido: {type(value).__name__}")
    return value
