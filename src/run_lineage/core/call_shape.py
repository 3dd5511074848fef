# src/run_lineage/core/call_shape.py
"""
Formatos de chamada reconhecidos pelas operações observadas.

Operações de saída aceitam exatamente dois formatos posicionais:

    DirectWrite   → op(data, destino, ...)
    IndexedWrite  → op(data, tabela_auxiliar, destino, ...)

A regra de detecção: percorrer os argumentos posicionais da esquerda
para a direita até o primeiro argumento textual (`str` ou `os.PathLike`).
Na posição 2 o formato é DirectWrite; na posição 3, IndexedWrite.
Qualquer outra posição (ou nenhum texto) é `UnsupportedCallShape`.

Operações de entrada aceitam um único formato:

    DirectRead    → op(origem, ...)

Argumentos nomeados nunca participam da detecção.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from .errors import unsupported_call_shape
from .exceptions import UnsupportedCallShape


@dataclass(frozen=True)
class DirectWrite:
    data: Any
    destination: str


@dataclass(frozen=True)
class IndexedWrite:
    data: Any
    table: Any
    destination: str


@dataclass(frozen=True)
class DirectRead:
    source: str


OutputShape = Union[DirectWrite, IndexedWrite]
CallShape = Union[DirectWrite, IndexedWrite, DirectRead]


def _is_textual(value: Any) -> bool:
    return isinstance(value, (str, os.PathLike))


def first_textual_position(args: Sequence[Any]) -> Optional[int]:
    """Posição (1-based) do primeiro argumento textual, ou None."""
    for index, value in enumerate(args, start=1):
        if _is_textual(value):
            return index
    return None


def _unsupported(args: Sequence[Any], operation: Optional[str], position: Optional[int]) -> UnsupportedCallShape:
    return UnsupportedCallShape.from_payload(
        unsupported_call_shape(
            operation=operation,
            argument_types=[type(a).__name__ for a in args],
            textual_position=position,
        )
    )


def parse_output_shape(args: Sequence[Any], operation: Optional[str] = None) -> OutputShape:
    """
    Classifica os argumentos de uma operação de saída.

    Raises:
        UnsupportedCallShape: Se o primeiro texto não estiver na posição 2 ou 3.
    """
    position = first_textual_position(args)
    if position == 2:
        return DirectWrite(data=args[0], destination=os.fspath(args[1]))
    if position == 3:
        return IndexedWrite(data=args[0], table=args[1], destination=os.fspath(args[2]))
    raise _unsupported(args, operation, position)


def parse_input_shape(args: Sequence[Any], operation: Optional[str] = None) -> DirectRead:
    """
    Classifica os argumentos de uma operação de entrada.

    Raises:
        UnsupportedCallShape: Se o primeiro argumento não for textual.
    """
    position = first_textual_position(args)
    if position == 1:
        return DirectRead(source=os.fspath(args[0]))
    raise _unsupported(args, operation, position)


def target_path(shape: CallShape) -> str:
    """Caminho textual referenciado pelo formato (destino ou origem)."""
    if isinstance(shape, (DirectWrite, IndexedWrite)):
        return shape.destination
    if isinstance(shape, DirectRead):
        return shape.source
    raise TypeError(f"Formato de chamada desconhecido: {type(shape).__name__}")
