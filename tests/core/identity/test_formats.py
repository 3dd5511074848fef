# tests/core/identity/test_formats.py
"""
Testes da classificação de conteúdo por extensão (format_id_for).
"""

import pytest

try:
    from run_lineage.core.formats import DEFAULT_FORMAT_ID, FORMAT_IDS, format_id_for
except Exception as e:  # noqa: BLE001
    format_id_for = None
    FORMAT_IDS = None
    DEFAULT_FORMAT_ID = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing formats module. Implement:\n"
            "- src/run_lineage/core/formats.py (format_id_for)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.mark.parametrize(
    "ext, expected",
    [
        ("bmp", "image/bmp"),
        ("gif", "image/gif"),
        ("jp2", "image/jp2"),
        ("jpeg", "image/jpeg"),
        ("png", "image/png"),
        ("tiff", "image/tiff"),
    ],
)
def test_known_extensions(ext, expected):
    _require_imports()
    assert format_id_for(ext) == expected
    assert format_id_for("." + ext) == expected


def test_unknown_extension_falls_back_to_octet_stream():
    _require_imports()
    assert DEFAULT_FORMAT_ID == "application/octet-stream"
    assert format_id_for("dat") == DEFAULT_FORMAT_ID
    assert format_id_for("") == DEFAULT_FORMAT_ID
    # `jpg` e `tif` não fazem parte da tabela base
    assert format_id_for("jpg") == DEFAULT_FORMAT_ID
    assert format_id_for("tif") == DEFAULT_FORMAT_ID


def test_matching_is_case_sensitive_by_default():
    _require_imports()
    assert format_id_for("PNG") == DEFAULT_FORMAT_ID
    assert format_id_for("PNG", case_sensitive=False) == "image/png"


def test_extra_extends_and_overrides_table():
    _require_imports()
    extra = {"csv": "text/csv", "png": "image/x-png"}
    assert format_id_for("csv", extra=extra) == "text/csv"
    assert format_id_for("png", extra=extra) == "image/x-png"
    # a tabela base não é alterada
    assert FORMAT_IDS["png"] == "image/png"
