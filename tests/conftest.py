"""Pytest fixtures and fakes for the camera widget tests.

The fakes stand in for the network-facing collaborators of the update
controller so refresh flows can be driven deterministically: background
work either completes immediately (SynchronousExecutor) or when a test
says so (ManualExecutor).
"""

from concurrent.futures import Executor, Future

import pytest
from PIL import Image

from src.core.controller import FetchGenerations, UpdateController
from src.core.dispatcher import MainDispatcher
from src.core.render_state import Region, RenderTarget
from src.storage.widget_store import WidgetStore

BASE_URL = "http://host:8123/"


class SynchronousExecutor(Executor):
    """Runs submitted work inline."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class ManualExecutor(Executor):
    """Holds submitted work until complete() is called."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def complete(self, index):
        future, fn, args, kwargs = self.jobs[index]
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)


class RecordingTarget(RenderTarget):
    """Render target that remembers every mutation."""

    def __init__(self):
        self.calls = []
        self.visible = {}
        self.image = None
        self.default_icon = False
        self.triggers = {}

    def set_visible(self, region, visible):
        self.calls.append(('set_visible', region, visible))
        self.visible[region] = visible

    def show_default_icon(self):
        self.calls.append(('show_default_icon',))
        self.default_icon = True

    def set_image(self, image):
        self.calls.append(('set_image', image))
        self.image = image

    def bind_trigger(self, region, callback):
        self.calls.append(('bind_trigger', region))
        self.triggers[region] = callback

    def tap(self, region=Region.IMAGE):
        self.triggers[region]()


class FakeGate:
    def __init__(self, active=True):
        self.active = active
        self.checks = 0

    def is_active(self):
        self.checks += 1
        return self.active


class FakeResolver:
    """Maps entity ids to picture paths, or to exceptions to raise."""

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def resolve_picture_url(self, entity_id):
        self.calls.append(entity_id)
        result = self.results.get(entity_id, "/api/camera_proxy/" + entity_id)
        if isinstance(result, Exception):
            raise result
        return result


class FakeFetcher:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return Image.new('RGB', (32, 24), (10, 20, 30))


class FakeUrlRepository:
    def __init__(self, url=BASE_URL):
        self.url = url

    def get_url(self):
        return self.url


@pytest.fixture
def store():
    """In-memory widget store."""
    return WidgetStore()


@pytest.fixture
def gate():
    return FakeGate()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def dispatcher():
    """Dispatcher whose background work finishes immediately."""
    return MainDispatcher(executor=SynchronousExecutor())


@pytest.fixture
def targets():
    """Render targets created on demand, keyed by widget id."""
    return {}


@pytest.fixture
def make_controller(store, gate, resolver, fetcher, targets):
    """Build an UpdateController around the fakes."""

    def _make(dispatcher, **kwargs):
        def target_for(widget_id):
            return targets.setdefault(widget_id, RecordingTarget())

        return UpdateController(
            store,
            gate,
            resolver,
            FakeUrlRepository(kwargs.pop('base_url', BASE_URL)),
            fetcher,
            dispatcher,
            target_for=target_for,
            generations=kwargs.pop('generations', FetchGenerations()),
            **kwargs
        )

    return _make


@pytest.fixture
def controller(make_controller, dispatcher):
    return make_controller(dispatcher)
