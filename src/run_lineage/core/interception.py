# src/run_lineage/core/interception.py
"""
Interception shim — operações observadas e instalação de patches.

Toda operação observada satisfaz o protocolo `Trackable`:

    before(args, kwargs)          → hook anterior (diagnóstico)
    call(*args, **kwargs)         → a operação real, sem alterações
    after(args, kwargs, result)   → hook posterior (registro do artefato)

`run_tracked` executa os três passos dentro de um bypass reentrante: se
a operação real, direta ou indiretamente, chamar outra operação
observada, a chamada interna vai direto à implementação real, sem
registrar nada.

Há duas formas de adoção, ambas sem alterar o código do script:
    - explícita: `tracked_output(func)` / `tracked_input(func)`
    - por patch: `install(alvo, "nome", direction=OUTPUT)` substitui um
      atributo de módulo ou classe e `Patch.remove()` restaura o original

Invariantes:
    - O retorno e as exceções da operação real chegam intactos ao chamador
    - Argumentos posicionais e nomeados são repassados sem modificação
    - O bypass é local à thread
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from .coordinator import INPUT, OUTPUT, RunCoordinator, get_coordinator
from .reentrancy import bypass, bypass_active


logger = logging.getLogger(__name__)

ORIGINAL_ATTR = "__run_lineage_original__"


# -----------------------------
# Protocolo e execução
# -----------------------------
@runtime_checkable
class Trackable(Protocol):
    def before(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        ...

    def call(self, *args: Any, **kwargs: Any) -> Any:
        ...

    def after(self, args: Tuple[Any, ...], kwargs: Dict[str, Any], result: Any) -> None:
        ...


def run_tracked(op: Trackable, *args: Any, **kwargs: Any) -> Any:
    """Executa `op` com hooks; chamadas aninhadas vão direto para `call`."""
    if bypass_active():
        return op.call(*args, **kwargs)

    with bypass():
        op.before(args, kwargs)
        result = op.call(*args, **kwargs)
        op.after(args, kwargs, result)
    return result


class TrackedOperation:
    """
    Operação real embrulhada com os hooks do coordenador.

    Args:
        func: implementação real.
        direction: `OUTPUT` (wasGeneratedBy) ou `INPUT` (used).
        coordinator: coordenador explícito; se None, o default do
            processo é consultado a cada chamada.
        name: nome usado em diagnósticos (default: `__qualname__`).
    """

    def __init__(
        self,
        func: Callable[..., Any],
        *,
        direction: str = OUTPUT,
        coordinator: Optional[RunCoordinator] = None,
        name: Optional[str] = None,
    ) -> None:
        if direction not in (OUTPUT, INPUT):
            raise ValueError(f"direction inválida: {direction!r}")
        self.func = func
        self.direction = direction
        self.coordinator = coordinator
        self.name = name or getattr(func, "__qualname__", None) or repr(func)

    def _coordinator(self) -> RunCoordinator:
        return self.coordinator if self.coordinator is not None else get_coordinator()

    def before(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        if self._coordinator().debug:
            logger.debug("Chamada observada: %s (bypass ativo)", self.name)

    def call(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def after(self, args: Tuple[Any, ...], kwargs: Dict[str, Any], result: Any) -> None:
        coordinator = self._coordinator()
        if self.direction == OUTPUT:
            coordinator.record_output(args, operation=self.name)
        else:
            coordinator.record_input(args, operation=self.name)
        if coordinator.debug:
            logger.debug("Chamada observada concluída: %s", self.name)

    def wrapper(self) -> Callable[..., Any]:
        """Função com a assinatura da original (vincula como método em classes)."""

        @functools.wraps(self.func)
        def tracked(*args: Any, **kwargs: Any) -> Any:
            return run_tracked(self, *args, **kwargs)

        setattr(tracked, ORIGINAL_ATTR, self.func)
        tracked.tracked_operation = self  # type: ignore[attr-defined]
        return tracked


def tracked_output(
    func: Optional[Callable[..., Any]] = None,
    *,
    coordinator: Optional[RunCoordinator] = None,
) -> Any:
    """Decorador: observa `func` como operação de saída."""

    def decorate(f: Callable[..., Any]) -> Callable[..., Any]:
        return TrackedOperation(f, direction=OUTPUT, coordinator=coordinator).wrapper()

    return decorate(func) if func is not None else decorate


def tracked_input(
    func: Optional[Callable[..., Any]] = None,
    *,
    coordinator: Optional[RunCoordinator] = None,
) -> Any:
    """Decorador: observa `func` como operação de entrada."""

    def decorate(f: Callable[..., Any]) -> Callable[..., Any]:
        return TrackedOperation(f, direction=INPUT, coordinator=coordinator).wrapper()

    return decorate(func) if func is not None else decorate


def original_of(func: Callable[..., Any]) -> Callable[..., Any]:
    """Implementação real por trás de um wrapper (ou a própria função)."""
    return getattr(func, ORIGINAL_ATTR, func)


# -----------------------------
# Patches
# -----------------------------
@dataclass
class Patch:
    target: Any
    name: str
    original: Any
    wrapper: Callable[..., Any]
    owned: bool = True
    active: bool = True

    def remove(self) -> None:
        """Restaura o atributo original; chamadas repetidas são inofensivas."""
        if not self.active:
            return
        if getattr(self.target, self.name, None) is self.wrapper:
            if self.owned:
                setattr(self.target, self.name, self.original)
            else:
                # atributo herdado: remover a sombra reexpõe o original
                delattr(self.target, self.name)
        self.active = False


def install(
    target: Any,
    name: str,
    *,
    direction: str = OUTPUT,
    coordinator: Optional[RunCoordinator] = None,
) -> Patch:
    """
    Substitui `target.name` por uma versão observada.

    Raises:
        AttributeError: Se o atributo não existir.
        RuntimeError: Se o atributo já estiver observado.
    """
    current = getattr(target, name)
    owned = name in getattr(target, "__dict__", {name: None})
    if hasattr(current, ORIGINAL_ATTR):
        raise RuntimeError(f"{name} já está sob observação")

    op = TrackedOperation(
        current,
        direction=direction,
        coordinator=coordinator,
        name=f"{getattr(target, '__name__', type(target).__name__)}.{name}",
    )
    wrapper = op.wrapper()
    setattr(target, name, wrapper)
    logger.debug("Patch instalado: %s", op.name)
    return Patch(target=target, name=name, original=current, wrapper=wrapper, owned=owned)


@contextmanager
def patched(
    *targets: Tuple[Any, str, str],
    coordinator: Optional[RunCoordinator] = None,
) -> Iterator[List[Patch]]:
    """
    Instala patches para `(alvo, nome, direção)` e remove todos ao sair.
    """
    patches: List[Patch] = []
    try:
        for target, name, direction in targets:
            patches.append(install(target, name, direction=direction, coordinator=coordinator))
        yield patches
    finally:
        for p in reversed(patches):
            p.remove()
