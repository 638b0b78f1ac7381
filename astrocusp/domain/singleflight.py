"""
Garde « single-flight » par clé.

Contrat: au plus une résolution en vol par clé (signe, hémisphère, date). Les appelants
concurrents sur la même clé attendent le premier (« leader ») et partagent son résultat, ou son
exception. L'état vit dans l'instance injectée, jamais dans un global de module.
"""

import threading
from collections.abc import Callable, Hashable
from typing import Any


class _Call:
    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: Any = None
        self.error: BaseException | None = None


class KeyedSingleFlight:
    """Dédoublonne les appels concurrents par clé."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[Hashable, _Call] = {}

    def in_flight(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._calls

    def do(self, key: Hashable, fn: Callable[[], Any]) -> Any:
        """
        Exécute `fn` une seule fois pour les appels simultanés sur `key`.

        Args:
            key: Clé de dédoublonnage.
            fn: Calcul à partager.

        Returns:
            Le résultat du leader; une exception du leader est relevée chez chaque suiveur.
        """
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if leader:
                call = self._calls[key] = _Call()
        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result
        try:
            call.result = fn()
            return call.result
        except BaseException as err:
            call.error = err
            raise
        finally:
            with self._lock:
                self._calls.pop(key, None)
            call.done.set()
