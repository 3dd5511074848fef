# src/run_lineage/core/reentrancy.py
"""
Bypass reentrante das operações observadas.

Enquanto uma operação observada executa, qualquer outra operação
observada chamada por ela (direta ou indiretamente) deve ir direto à
implementação real. O contador é local à thread: chamadas concorrentes
em outras threads continuam sendo rastreadas.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


_state = threading.local()


def bypass_active() -> bool:
    return getattr(_state, "depth", 0) > 0


@contextmanager
def bypass() -> Iterator[None]:
    """Desvia chamadas observadas aninhadas para a implementação real."""
    _state.depth = getattr(_state, "depth", 0) + 1
    try:
        yield
    finally:
        _state.depth -= 1
