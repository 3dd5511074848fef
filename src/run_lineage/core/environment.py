# src/run_lineage/core/environment.py
"""
Consultas ao ambiente de execução com fallbacks explícitos.

Cada descritor de ambiente de uma Execution (conta, host, runtime, SO,
aplicação, dependências) é obtido por uma consulta independente. Uma
consulta que falha, ou que retorna texto vazio, é substituída pelo valor
correspondente de `EnvironmentDefaults`; nenhuma exceção chega ao
chamador.

As consultas são injetáveis via `EnvironmentProbe`, permitindo que os
testes simulem falhas de forma determinística.
"""

from __future__ import annotations

import logging
import os
import platform
import socket
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from .config.settings import EnvironmentDefaults


logger = logging.getLogger(__name__)

Lookup = Callable[[], str]


def _is_windows(platform_name: Optional[str] = None) -> bool:
    name = platform_name if platform_name is not None else sys.platform
    return name.startswith("win") or name == "cygwin"


def lookup_account_name(
    environ: Optional[Mapping[str, str]] = None,
    platform_name: Optional[str] = None,
) -> str:
    """Conta do usuário: `USERNAME` no Windows, `USER` em hosts POSIX."""
    env = os.environ if environ is None else environ
    key = "USERNAME" if _is_windows(platform_name) else "USER"
    return env.get(key, "")


def lookup_host_name() -> str:
    return socket.gethostname().strip()


def lookup_runtime() -> str:
    """Versão do interpretador, no estilo `nome versão (build) compilador`."""
    build = platform.python_build()
    return " ".join(
        part
        for part in (
            platform.python_implementation(),
            platform.python_version(),
            f"({build[0]}, {build[1]})",
            platform.python_compiler(),
        )
        if part
    )


def lookup_operating_system() -> str:
    if sys.platform == "darwin":
        release, _, machine = platform.mac_ver()
        if release:
            return f"macOS Version: {release} {machine}".strip()
    if _is_windows():
        release, version, _, ptype = platform.win32_ver()
        return f"Windows {release} {version} {ptype}".strip()
    return platform.platform()


def lookup_software_application() -> str:
    """Script de nível mais alto que iniciou o processo."""
    main = sys.modules.get("__main__")
    path = getattr(main, "__file__", None) or (sys.argv[0] if sys.argv else "")
    return os.path.abspath(path) if path else ""


def lookup_module_dependencies() -> str:
    """Snapshot do caminho de busca de módulos no instante da consulta."""
    return os.pathsep.join(p for p in sys.path if p)


@dataclass(frozen=True)
class EnvironmentProbe:
    """Conjunto de consultas usadas na construção de uma Execution."""

    account_name: Lookup = lookup_account_name
    host_id: Lookup = lookup_host_name
    runtime: Lookup = lookup_runtime
    operating_system: Lookup = lookup_operating_system
    software_application: Lookup = lookup_software_application
    module_dependencies: Lookup = lookup_module_dependencies


def _safe(name: str, lookup: Lookup, fallback: str) -> str:
    try:
        value = lookup()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Consulta de ambiente '%s' falhou (%s); usando fallback", name, exc)
        return fallback
    if not value:
        return fallback
    return str(value).strip() or fallback


def capture_environment(
    probe: Optional[EnvironmentProbe] = None,
    defaults: Optional[EnvironmentDefaults] = None,
) -> Dict[str, str]:
    """
    Executa todas as consultas e retorna os descritores resolvidos.

    Invariantes:
        - Todas as chaves estão sempre presentes
        - `host_id` nunca é vazio (fallback `localhost`)
        - Nenhuma exceção é propagada
    """
    probe = probe or EnvironmentProbe()
    defaults = defaults or EnvironmentDefaults()

    return {
        "account_name": _safe("account_name", probe.account_name, defaults.account_name),
        "host_id": _safe("host_id", probe.host_id, defaults.host_id or "localhost"),
        "runtime": _safe("runtime", probe.runtime, defaults.runtime),
        "operating_system": _safe(
            "operating_system", probe.operating_system, defaults.operating_system
        ),
        "software_application": _safe(
            "software_application", probe.software_application, defaults.software_application
        ),
        "module_dependencies": _safe("module_dependencies", probe.module_dependencies, ""),
    }
