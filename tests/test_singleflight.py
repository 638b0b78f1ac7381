"""
Tests de la garde single-flight par clé.

Ce module vérifie qu'un seul calcul est lancé pour des appels concurrents sur la même clé, que
le résultat ou l'exception du leader est partagé et que la clé est libérée ensuite.
"""

from __future__ import annotations

import threading
import time

import pytest

from astrocusp.domain.errors import StoreUnavailable
from astrocusp.domain.singleflight import KeyedSingleFlight

FOLLOWERS = 4
WAIT_SECONDS = 5


def _wait_in_flight(flight: KeyedSingleFlight, key: str) -> None:
    deadline = time.monotonic() + WAIT_SECONDS
    while not flight.in_flight(key) and time.monotonic() < deadline:
        time.sleep(0.01)


def test_concurrent_callers_share_one_call() -> None:
    flight = KeyedSingleFlight()
    release = threading.Event()
    calls = []
    results = []

    def work() -> str:
        calls.append(1)
        release.wait(timeout=WAIT_SECONDS)
        return "row"

    def caller() -> None:
        results.append(flight.do("leo:NH:2025-04-20", work))

    leader = threading.Thread(target=caller)
    leader.start()
    _wait_in_flight(flight, "leo:NH:2025-04-20")
    followers = [threading.Thread(target=caller) for _ in range(FOLLOWERS)]
    for t in followers:
        t.start()
    time.sleep(0.2)
    release.set()
    for t in [leader, *followers]:
        t.join(timeout=WAIT_SECONDS)

    assert len(calls) == 1
    assert results == ["row"] * (FOLLOWERS + 1)
    assert not flight.in_flight("leo:NH:2025-04-20")


def test_follower_receives_leader_error() -> None:
    flight = KeyedSingleFlight()
    release = threading.Event()
    errors = []

    def failing() -> None:
        release.wait(timeout=WAIT_SECONDS)
        raise StoreUnavailable("down")

    def caller() -> None:
        try:
            flight.do("k", failing)
        except StoreUnavailable as err:
            errors.append(err)

    leader = threading.Thread(target=caller)
    leader.start()
    _wait_in_flight(flight, "k")
    follower = threading.Thread(target=caller)
    follower.start()
    time.sleep(0.2)
    release.set()
    leader.join(timeout=WAIT_SECONDS)
    follower.join(timeout=WAIT_SECONDS)

    assert len(errors) == 2
    assert errors[0] is errors[1]


def test_sequential_calls_are_not_cached() -> None:
    flight = KeyedSingleFlight()
    counter = iter(range(10))
    assert flight.do("k", lambda: next(counter)) == 0
    assert flight.do("k", lambda: next(counter)) == 1


def test_key_released_after_error() -> None:
    flight = KeyedSingleFlight()

    def boom() -> None:
        raise StoreUnavailable("down")

    with pytest.raises(StoreUnavailable):
        flight.do("k", boom)
    assert not flight.in_flight("k")
    assert flight.do("k", lambda: "ok") == "ok"
