# tests/conftest.py
"""
Fixtures compartilhados para testes do Run Lineage.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações YAML mínimas e determinísticas
- consultas de ambiente controladas (EnvironmentProbe fixo)
- um coordenador isolado, com ou sem run ativa
- um diretório de trabalho temporário
- operações de escrita simples, independentes de formato

Decisões arquiteturais:
    - Nenhum teste depende do ambiente real da máquina (host, usuário)
    - O coordenador default do processo é descartado após cada teste
    - Operações "reais" usadas nos testes apenas gravam bytes

Limites explícitos:
    - Não substituir testes de integração com Pillow/pandas (ver tests/io)
"""

from pathlib import Path

import pytest


@pytest.fixture
def capture_defaults_yaml() -> str:
    """YAML de defaults semelhante ao `defaults.yaml` empacotado."""
    return """\
debug: false
capture:
  file_writes: true
  file_reads: true
  output_ids_policy: first_write
lookup:
  search_paths: []
formats:
  case_sensitive: true
  extra: {}
"""


@pytest.fixture
def capture_local_yaml() -> str:
    """YAML de override local: liga debug e troca a política de output_ids."""
    return """\
debug: true
capture:
  output_ids_policy: every_write
formats:
  extra:
    csv: text/csv
"""


@pytest.fixture
def fixed_probe():
    """
    Consultas de ambiente determinísticas.

    O import é lazy para que falhas do core apareçam no teste, não na coleta.
    """
    from run_lineage.core.environment import EnvironmentProbe

    return EnvironmentProbe(
        account_name=lambda: "analyst",
        host_id=lambda: "grid-node-01",
        runtime=lambda: "CPython 3.12.1",
        operating_system=lambda: "Linux-6.1-x86_64",
        software_application=lambda: "/home/analyst/classify_grid.py",
        module_dependencies=lambda: "/opt/lib:/home/analyst/lib",
    )


@pytest.fixture
def coordinator(fixed_probe):
    from run_lineage.core.coordinator import RunCoordinator

    return RunCoordinator(probe=fixed_probe)


@pytest.fixture
def active_run(coordinator):
    """Coordenador com uma run `test` já iniciada."""
    coordinator.begin_run("test")
    return coordinator


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Diretório de trabalho corrente isolado."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_bytes():
    """Operação real mínima no formato (data, destino, ...)."""

    def write_bytes(data, destination, mode="wb"):
        with open(destination, mode) as f:
            f.write(bytes(data))
        return len(data)

    return write_bytes


@pytest.fixture
def write_indexed():
    """Operação real mínima no formato (data, tabela, destino, ...)."""

    def write_indexed(data, table, destination):
        with open(destination, "wb") as f:
            f.write(bytes(table[i] for i in data))

    return write_indexed


@pytest.fixture(autouse=True)
def _reset_default_coordinator():
    yield
    from run_lineage.core.coordinator import reset_coordinator

    reset_coordinator()
