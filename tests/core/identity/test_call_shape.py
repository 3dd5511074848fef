# tests/core/identity/test_call_shape.py
"""
Testes da detecção de formatos de chamada (DirectWrite / IndexedWrite / DirectRead).

Regra: a posição (1-based) do primeiro argumento posicional textual
define o formato. Argumentos nomeados nunca participam da detecção.
"""

from pathlib import Path

import pytest

try:
    from run_lineage.core.call_shape import (
        DirectRead,
        DirectWrite,
        IndexedWrite,
        first_textual_position,
        parse_input_shape,
        parse_output_shape,
        target_path,
    )
    from run_lineage.core.exceptions import UnsupportedCallShape
except Exception as e:  # noqa: BLE001
    parse_output_shape = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing call_shape module. Implement:\n"
            "- src/run_lineage/core/call_shape.py (parse_output_shape, parse_input_shape)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_direct_write():
    _require_imports()
    data = [[1, 2], [3, 4]]
    shape = parse_output_shape((data, "out.png", "png"))
    assert shape == DirectWrite(data=data, destination="out.png")
    assert target_path(shape) == "out.png"


def test_indexed_write():
    _require_imports()
    shape = parse_output_shape(([0, 1], [(0, 0, 0), (255, 255, 255)], "idx.gif"))
    assert isinstance(shape, IndexedWrite)
    assert shape.destination == "idx.gif"
    assert shape.table == [(0, 0, 0), (255, 255, 255)]


def test_pathlike_counts_as_textual():
    _require_imports()
    shape = parse_output_shape((b"\x00", Path("dir") / "out.bmp"))
    assert shape.destination == str(Path("dir") / "out.bmp")


@pytest.mark.parametrize(
    "args, position",
    [
        (("out.png", [1]), 1),
        (([1], [2], [3], "out.png"), 4),
        (([1], [2]), None),
        ((), None),
    ],
)
def test_unsupported_output_shapes(args, position):
    """
    Qualquer posição diferente de 2 ou 3 é rejeitada, com os tipos dos
    argumentos registrados para diagnóstico.
    """
    _require_imports()
    assert first_textual_position(args) == position
    with pytest.raises(UnsupportedCallShape) as info:
        parse_output_shape(args, "write_image")
    assert info.value.details["operation"] == "write_image"
    assert info.value.details["textual_position"] == position
    assert len(info.value.details["argument_types"]) == len(args)


def test_keyword_destination_is_not_detected():
    _require_imports()
    # destino nomeado não aparece em args posicionais
    with pytest.raises(UnsupportedCallShape):
        parse_output_shape(([1],))


def test_direct_read():
    _require_imports()
    shape = parse_input_shape(("in.tiff", "tiff"))
    assert shape == DirectRead(source="in.tiff")
    assert target_path(shape) == "in.tiff"


def test_read_requires_textual_first_argument():
    _require_imports()
    with pytest.raises(UnsupportedCallShape):
        parse_input_shape(([1], "in.tiff"))
