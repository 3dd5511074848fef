# tests/core/config/test_settings.py
"""
Testes da visão tipada da configuração (CaptureSettings).

Garante que:
- `CaptureSettings()` equivale ao `defaults.yaml` empacotado
- overrides chegam tipados ao coordenador
- políticas e seções inválidas são rejeitadas com ConfigError
"""

import pytest

try:
    from run_lineage.core.config import (
        CaptureSettings,
        ConfigError,
        EnvironmentDefaults,
        load_config,
    )
except Exception as e:  # noqa: BLE001
    CaptureSettings = None
    ConfigError = None
    EnvironmentDefaults = None
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing settings module. Implement:\n"
            "- src/run_lineage/core/config/settings.py (CaptureSettings)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_packaged_defaults_match_dataclass_defaults():
    _require_imports()
    assert CaptureSettings.from_config(load_config()) == CaptureSettings()


def test_from_config_reads_every_section():
    _require_imports()
    cfg = {
        "debug": True,
        "capture": {
            "file_writes": False,
            "file_reads": True,
            "output_ids_policy": "every_write",
            "strict": True,
        },
        "lookup": {"search_paths": ["/data/known"]},
        "formats": {"case_sensitive": False, "extra": {"csv": "text/csv"}},
        "environment": {"host_id": "", "account_name": "ops"},
    }
    s = CaptureSettings.from_config(cfg)

    assert s.debug is True
    assert s.capture_file_writes is False
    assert s.capture_file_reads is True
    assert s.output_ids_policy == "every_write"
    assert s.strict is True
    assert s.search_paths == ("/data/known",)
    assert s.case_sensitive_formats is False
    assert s.extra_formats == {"csv": "text/csv"}
    # host vazio volta para o fallback canônico
    assert s.environment == EnvironmentDefaults(host_id="localhost", account_name="ops")


def test_empty_config_uses_defaults():
    _require_imports()
    assert CaptureSettings.from_config({}) == CaptureSettings()


def test_unknown_output_policy_raises():
    _require_imports()
    with pytest.raises(ConfigError):
        CaptureSettings.from_config({"capture": {"output_ids_policy": "last_write"}})


def test_non_mapping_section_raises():
    _require_imports()
    with pytest.raises(ConfigError):
        CaptureSettings.from_config({"capture": ["file_writes"]})


def test_search_paths_must_be_list():
    _require_imports()
    with pytest.raises(ConfigError):
        CaptureSettings.from_config({"lookup": {"search_paths": "/data"}})
