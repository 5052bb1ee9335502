"""Registry resolving a task's declared name to an executable class."""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from cadence_worker.errors import ConfigurationError, ExecutableNotFoundError

logger = logging.getLogger(__name__)

E = TypeVar("E")


class ExecutableLookup(Generic[E]):
    """Name → executable mapping for one (domain, task list).

    Registration and lookup happen in separate phases: `add` is only allowed
    until `freeze` is called (the worker freezes every lookup in `start`),
    after which poller threads read it concurrently without locking.
    """

    def __init__(self) -> None:
        self._executables: dict[str, E] = {}
        self._frozen = False

    def add(self, name: str, executable: E) -> None:
        if self._frozen:
            raise ConfigurationError(f"Cannot register {name!r}: lookup is frozen")
        if name in self._executables:
            logger.warning("Overwriting registered executable", extra={"executable": name})
        self._executables[name] = executable

    def find(self, name: str) -> E:
        try:
            return self._executables[name]
        except KeyError:
            raise ExecutableNotFoundError(name) from None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> list[str]:
        return list(self._executables)

    def __contains__(self, name: object) -> bool:
        return name in self._executables

    def __len__(self) -> int:
        return len(self._executables)

    def __repr__(self) -> str:
        return f"ExecutableLookup({self.names!r})"
