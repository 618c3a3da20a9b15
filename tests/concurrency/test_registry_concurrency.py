"""
Concurrent registration and dispatch against one FailureRegistry.

Expected Behavior:
- No registration is lost when many threads register at once
- Registration order per thread is preserved
- A dispatch running while handlers are being registered sees a
  consistent snapshot and raises exactly once
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

from must.registry import FailureRegistry
from must.testing import RecordingHandler, recover

THREADS = 8
PER_THREAD = 200


def test_concurrent_registration_loses_nothing():
    registry = FailureRegistry()
    barrier = Barrier(THREADS)

    def worker(thread_id: int) -> list[RecordingHandler]:
        handlers = [RecordingHandler() for _ in range(PER_THREAD)]
        barrier.wait()
        for handler in handlers:
            registry.register(handler)
        return handlers

    with ThreadPoolExecutor(max_workers=THREADS) as pool:
        results = list(pool.map(worker, range(THREADS)))

    assert len(registry) == THREADS * PER_THREAD

    positions = {id(h): i for i, h in enumerate(registry.handlers)}
    for handlers in results:
        indexes = [positions[id(h)] for h in handlers]
        assert indexes == sorted(indexes)


def test_dispatch_during_registration_sees_a_snapshot():
    registry = FailureRegistry()
    seed = RecordingHandler()
    registry.register(seed)
    barrier = Barrier(2)

    def register_many() -> None:
        barrier.wait()
        for _ in range(PER_THREAD):
            registry.register(RecordingHandler())

    def dispatch_many() -> list[bool]:
        barrier.wait()
        outcomes = []
        for _ in range(50):
            with recover() as result:
                registry.abort("m", "d")
            outcomes.append(bool(result))
        return outcomes

    with ThreadPoolExecutor(max_workers=2) as pool:
        registering = pool.submit(register_many)
        dispatching = pool.submit(dispatch_many)
        registering.result()
        outcomes = dispatching.result()

    assert all(outcomes)
    assert seed.call_count == 50
    assert len(registry) == PER_THREAD + 1
    # Later handlers were called at most once per dispatch
    assert all(h.call_count <= 50 for h in registry.handlers)
