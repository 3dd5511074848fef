# tests/core/coordinator/test_tracking_failures.py
"""
Testes da política de falhas de rastreamento.

Garante que:
- formatos de chamada não suportados e caminhos não resolvidos viram
  diagnóstico (WARNING) sem afetar a operação real
- `strict=True` relança a falha após a operação real
- a colisão de identificadores é sempre fatal
- nenhuma captura acontece sem run ativa ou com a captura desligada
"""

import logging
from pathlib import Path

import pytest

try:
    from run_lineage.core.config.settings import CaptureSettings
    from run_lineage.core.coordinator import RunCoordinator
    from run_lineage.core.exceptions import (
        DuplicateIdentifierCollision,
        NoActiveRun,
        PathResolutionFailure,
        UnsupportedCallShape,
    )
except Exception as e:  # noqa: BLE001
    RunCoordinator = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing coordinator/exceptions modules. Implement:\n"
            "- src/run_lineage/core/coordinator.py (RunCoordinator)\n"
            "- src/run_lineage/core/exceptions.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_unsupported_shape_is_diagnosed_not_raised(active_run, workdir: Path, caplog):
    """
    Uma chamada cujo primeiro texto está na posição 1 não é rastreada:
    a operação real executa, nenhum objeto é criado e um diagnóstico
    `UNSUPPORTED_CALL_SHAPE` é registrado com log WARNING.
    """
    _require_imports()
    calls = []

    def save(destination, data):
        calls.append((destination, data))
        return "ok"

    with caplog.at_level(logging.WARNING, logger="run_lineage"):
        result = active_run.intercept_output(save, "out.png", b"x")

    assert result == "ok"
    assert calls == [("out.png", b"x")]
    assert active_run.execution.objects == {}
    assert active_run.execution.output_ids == []
    (diag,) = active_run.diagnostics
    assert diag.type == "UNSUPPORTED_CALL_SHAPE"
    assert diag.details["textual_position"] == 1
    assert any(r.levelno == logging.WARNING for r in caplog.records)
    assert active_run.events[-1]["message"] == "tracking_failed"


def test_missing_destination_is_diagnosed(active_run, workdir: Path):
    _require_imports()

    def pretend_write(data, destination):
        return None

    outcome = active_run.record_output((b"x", "never-written.png"), operation="pretend_write")
    active_run.intercept_output(pretend_write, b"x", "never-written.png")

    assert outcome.status == "failed"
    assert outcome.error.type == "PATH_RESOLUTION_FAILURE"
    assert len(active_run.diagnostics) == 2
    assert active_run.execution.objects == {}


def test_real_operation_errors_propagate_unchanged(active_run, workdir: Path):
    _require_imports()

    def failing(data, destination):
        raise IOError("disco cheio")

    with pytest.raises(IOError, match="disco cheio"):
        active_run.intercept_output(failing, b"x", "out.png")
    assert active_run.diagnostics == []
    assert active_run.execution.objects == {}


def test_strict_mode_reraises_after_real_operation(fixed_probe, workdir: Path):
    _require_imports()
    coord = RunCoordinator(CaptureSettings(strict=True), probe=fixed_probe)
    coord.begin_run()
    calls = []

    def save(*args):
        calls.append(args)

    with pytest.raises(UnsupportedCallShape):
        coord.intercept_output(save, b"x", b"y")
    assert calls == [(b"x", b"y")]

    with pytest.raises(PathResolutionFailure):
        coord.intercept_output(save, b"x", "missing.png")
    assert len(coord.diagnostics) == 2


def test_identifier_collision_is_fatal(fixed_probe, workdir: Path, write_bytes, caplog):
    """
    Se o gerador de ids devolver um id já presente na tabela para um
    caminho novo, a captura levanta `DuplicateIdentifierCollision` mesmo
    fora do modo estrito; o objeto existente não é sobrescrito.
    """
    _require_imports()
    ids = iter(["urn:exec", "urn:pkg", "urn:same", "urn:same"])
    coord = RunCoordinator(probe=fixed_probe, id_factory=lambda: next(ids))
    coord.begin_run()

    coord.intercept_output(write_bytes, b"a", "a.png")
    with caplog.at_level(logging.ERROR, logger="run_lineage"):
        with pytest.raises(DuplicateIdentifierCollision) as info:
            coord.intercept_output(write_bytes, b"b", "b.png")

    assert info.value.fatal is True
    assert info.value.details["identifier"] == "urn:same"
    assert coord.execution.objects["urn:same"].file_name == "a.png"
    assert coord.diagnostics[-1].fatal is True
    assert (workdir / "b.png").exists()
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_no_active_run(coordinator, workdir: Path, write_bytes):
    _require_imports()
    result = coordinator.intercept_output(write_bytes, b"abc", "out.png")

    assert result == 3
    assert coordinator.execution is None
    assert coordinator.diagnostics[-1].type == "NO_ACTIVE_RUN"
    with pytest.raises(NoActiveRun):
        coordinator.end_run()


def test_capture_disabled_only_runs_operation(fixed_probe, workdir: Path, write_bytes):
    _require_imports()
    coord = RunCoordinator(
        CaptureSettings(capture_file_writes=False, capture_file_reads=False),
        probe=fixed_probe,
    )
    coord.begin_run()

    assert coord.intercept_output(write_bytes, b"x", "out.png") == 1
    assert coord.record_output((b"x", "out.png")).status == "skipped"
    assert coord.execution.objects == {}
    assert coord.diagnostics == []
