# src/run_lineage/io/image.py
"""
Escrita e leitura de imagens a partir de arrays numpy.

Formatos de chamada de `write_image`:

    write_image(A, destino[, fmt], **opcoes)
    write_image(X, colormap, destino[, fmt], **opcoes)

- `A` em escala de cinza (M×N), RGB (M×N×3) ou RGBA (M×N×4)
- arrays `float` são interpretados no intervalo [0, 1] e escalados para
  8 bits; arrays `bool` são gravados como imagens binárias
- arrays inteiros em 0..255 viram `uint8`; em escala de cinza, 0..65535
  viram `uint16`; fora disso, ValueError
- `X` indexado com `colormap` P×3 em [0, 1]; índices `float` são
  1-based e convertidos com `X - 1`
- `fmt` é opcional; sem ele o formato vem da extensão do destino
- opções nomeadas são repassadas ao `Image.save` do Pillow
"""

from __future__ import annotations

import os
import sys
from typing import Any, List, Optional

import numpy as np
from PIL import Image

from ..core.call_shape import first_textual_position
from ..core.coordinator import INPUT, OUTPUT, RunCoordinator
from ..core.interception import Patch, install


_PIL_FORMATS = {
    "bmp": "BMP",
    "gif": "GIF",
    "jp2": "JPEG2000",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "tif": "TIFF",
    "tiff": "TIFF",
}


def _pil_format(fmt: Optional[str]) -> Optional[str]:
    if fmt is None:
        return None
    key = fmt.lower().lstrip(".")
    if key not in _PIL_FORMATS:
        raise ValueError(f"Formato de imagem não suportado: {fmt}")
    return _PIL_FORMATS[key]


def _to_pixels(array: np.ndarray) -> np.ndarray:
    """Converte `array` para um dtype aceito pelo `Image.fromarray`."""
    if array.dtype == np.bool_ or array.dtype == np.uint8:
        return array
    if array.dtype == np.uint16 and array.ndim == 2:
        return array
    if np.issubdtype(array.dtype, np.floating):
        return np.round(np.clip(array, 0.0, 1.0) * 255).astype(np.uint8)
    if np.issubdtype(array.dtype, np.integer):
        low, high = int(array.min()), int(array.max())
        if low >= 0 and high <= 255:
            return array.astype(np.uint8)
        if low >= 0 and high <= 65535 and array.ndim == 2:
            return array.astype(np.uint16)
        raise ValueError(
            f"Valores inteiros fora do intervalo gravável: [{low}, {high}] "
            "(esperado 0..255, ou 0..65535 em escala de cinza)"
        )
    raise ValueError(f"dtype de imagem não suportado: {array.dtype}")


def _indexed_image(indices: np.ndarray, colormap: Any) -> Image.Image:
    cmap = np.asarray(colormap, dtype=float)
    if cmap.ndim != 2 or cmap.shape[1] != 3:
        raise ValueError("colormap deve ter formato P×3")
    if cmap.shape[0] > 256:
        raise ValueError("colormap com mais de 256 entradas não é suportado")

    if np.issubdtype(indices.dtype, np.floating):
        indices = indices - 1
    # putpalette converte a imagem L em P
    image = Image.fromarray(indices.astype(np.uint8))
    palette = np.round(np.clip(cmap, 0.0, 1.0) * 255).astype(np.uint8)
    image.putpalette(palette.flatten().tolist())
    return image


def write_image(data: Any, *args: Any, **options: Any) -> None:
    """
    Grava `data` como imagem no destino informado.

    Raises:
        TypeError: Se o destino não for texto na posição 2 ou 3.
        ValueError: Se o array estiver vazio, tiver valores não graváveis
            ou o formato não for suportado.
    """
    positional = (data,) + tuple(args)
    position = first_textual_position(positional)
    if position not in (2, 3):
        raise TypeError(
            "write_image espera (A, destino[, fmt]) ou (X, colormap, destino[, fmt]) "
            "com o destino posicional em texto"
        )
    destination = os.fspath(positional[position - 1])
    trailing = positional[position:]
    fmt = trailing[0] if trailing and isinstance(trailing[0], str) else None

    array = np.asarray(data)
    if array.size == 0:
        raise ValueError("A imagem não pode ser um array vazio")

    if position == 3:
        image = _indexed_image(array, positional[1])
    else:
        image = Image.fromarray(_to_pixels(array))

    image.save(destination, format=_pil_format(fmt), **options)


def read_image(source: str, fmt: Optional[str] = None) -> np.ndarray:
    """Lê a imagem em `source` e retorna seus pixels como array numpy."""
    with Image.open(source, formats=[_pil_format(fmt)] if fmt else None) as image:
        return np.asarray(image)


def install_image_tracking(coordinator: Optional[RunCoordinator] = None) -> List[Patch]:
    """Coloca `write_image` e `read_image` deste módulo sob observação."""
    module = sys.modules[__name__]
    return [
        install(module, "write_image", direction=OUTPUT, coordinator=coordinator),
        install(module, "read_image", direction=INPUT, coordinator=coordinator),
    ]
