# tests/conftest.py
import logging

import pytest

from dispatchcore import Subject, TopicRouter
from dispatchcore.observability import Metrics


class Recorder:
    """Callable subscriber that records every call as (label, args)."""

    def __init__(self, label, log):
        self.label = label
        self.log = log

    def __call__(self, *args):
        self.log.append((self.label, args))


class RecordingObserver:
    def __init__(self, label, log):
        self.label = label
        self.log = log

    def update(self, *args):
        self.log.append((self.label, args))


@pytest.fixture
def calls():
    return []


@pytest.fixture
def metrics():
    return Metrics()


@pytest.fixture
def router(metrics):
    return TopicRouter("test", metrics=metrics)


@pytest.fixture
def subject(metrics):
    return Subject("test", metrics=metrics)


@pytest.fixture
def recorder(calls):
    def make(label):
        return Recorder(label, calls)
    return make


@pytest.fixture
def observer(calls):
    def make(label):
        return RecordingObserver(label, calls)
    return make


@pytest.fixture
def restore_dispatch_loggers():
    names = ("dispatchcore.router", "dispatchcore.subject")
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
