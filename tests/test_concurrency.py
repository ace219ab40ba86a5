import threading
from concurrent.futures import ThreadPoolExecutor

from dispatchcore import Subject, TopicRouter

WORKER_TIMEOUT = 10


def run_workers(fn, args_list):
    """Run ``fn`` once per argument on its own thread; re-raise worker errors here."""
    with ThreadPoolExecutor(max_workers=len(args_list)) as pool:
        futures = [pool.submit(fn, arg) for arg in args_list]
        return [f.result(timeout=WORKER_TIMEOUT) for f in futures]


def test_concurrent_subscribe_and_publish_from_threads():
    router = TopicRouter("threads")
    received = []
    lock = threading.Lock()
    n_threads, per_thread = 8, 50

    def make_callback(i):
        def callback(value):
            with lock:
                received.append((i, value))
        return callback

    def worker(i):
        results = []
        for k in range(per_thread):
            results.append(router.subscribe("t", make_callback(i)))
            results.append(router.publish("t", k))
        return results

    outcomes = run_workers(worker, list(range(n_threads)))

    assert all(all(results) for results in outcomes)
    assert router.subscriber_count("t") == n_threads * per_thread
    assert router.stats()["t"]["messages"] == n_threads * per_thread
    # each worker's own callback is registered before its first publish
    assert {i for i, _ in received} == set(range(n_threads))


def test_concurrent_attach_detach_keeps_count_consistent():
    subject = Subject("threads")

    class Obs:
        def update(self, *args):
            pass

    observers = [Obs() for _ in range(200)]

    def attach_then_detach(chunk):
        for obs in chunk:
            subject.attach(obs)
            subject.notify("tick")
        return [subject.detach(obs) for obs in chunk[::2]]

    chunks = [observers[i::4] for i in range(4)]
    detached = run_workers(attach_then_detach, chunks)

    assert [len(d) for d in detached] == [25, 25, 25, 25]
    assert all(all(d) for d in detached)
    assert subject.observer_count == 100
