# src/run_lineage/io/tabular.py
"""
Observação de leituras e escritas tabulares do pandas.

Os métodos de escrita de `DataFrame` recebem o próprio DataFrame como
primeiro argumento posicional, o que os encaixa no formato DirectWrite:

    df.to_csv("saida.csv")   ≡   DataFrame.to_csv(df, "saida.csv")

`pandas.read_csv("entrada.csv")` corresponde ao formato DirectRead.
Chamadas com o caminho apenas nomeado (`path_or_buf=...`) ou com buffers
em memória não são rastreadas e geram diagnóstico.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

import pandas as pd

from ..core.coordinator import INPUT, OUTPUT, RunCoordinator
from ..core.interception import Patch, install, patched


TABULAR_TARGETS: Tuple[Tuple[Any, str, str], ...] = (
    (pd.DataFrame, "to_csv", OUTPUT),
    (pd.DataFrame, "to_json", OUTPUT),
    (pd, "read_csv", INPUT),
)


@contextmanager
def pandas_tracking(coordinator: Optional[RunCoordinator] = None) -> Iterator[List[Patch]]:
    """Observa as operações de `TABULAR_TARGETS` enquanto o bloco executa."""
    with patched(*TABULAR_TARGETS, coordinator=coordinator) as patches:
        yield patches


def install_pandas_tracking(coordinator: Optional[RunCoordinator] = None) -> List[Patch]:
    """Versão sem escopo de `pandas_tracking`; remova com `Patch.remove()`."""
    return [
        install(target, name, direction=direction, coordinator=coordinator)
        for target, name, direction in TABULAR_TARGETS
    ]
