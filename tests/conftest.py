import itertools
import threading
from concurrent.futures import Future
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as gexc

from pubsub_tools import topic_client as tc
from pubsub_tools.config import PubSubConfig


class FakePublisher:
    """In-memory stand-in for pubsub_v1.PublisherClient."""

    def __init__(self, page_size=2):
        self.page_size = page_size
        self.topics = {}
        self.published = []
        self.calls = []
        self.fail_list_on_page = None
        self.publish_error = None
        self.publish_raises = None
        self.hold_publish = False
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @staticmethod
    def topic_path(project, topic):
        return 'projects/{}/topics/{}'.format(project, topic)

    def list_topics(self, request, timeout=None):
        self.calls.append(('list_topics', request['project']))
        prefix = request['project'] + '/topics/'
        names = sorted(x for x in self.topics if x.startswith(prefix))
        return SimpleNamespace(pages=self._pages(names))

    def _pages(self, names):
        for i, start in enumerate(range(0, len(names), self.page_size)):
            if self.fail_list_on_page == i:
                raise gexc.ServiceUnavailable('page fetch failed')
            chunk = names[start:start + self.page_size]
            yield SimpleNamespace(topics=[SimpleNamespace(name=x) for x in chunk])

    def get_topic(self, request, timeout=None):
        self.calls.append(('get_topic', request['topic']))
        with self._lock:
            if request['topic'] not in self.topics:
                raise gexc.NotFound('Resource not found')
            return self.topics[request['topic']]

    def create_topic(self, request, timeout=None):
        self.calls.append(('create_topic', request['name']))
        with self._lock:
            if request['name'] in self.topics:
                raise gexc.AlreadyExists('Resource already exists in the project')
            self.topics[request['name']] = SimpleNamespace(name=request['name'])
            return self.topics[request['name']]

    def delete_topic(self, request, timeout=None):
        self.calls.append(('delete_topic', request['topic']))
        with self._lock:
            if request['topic'] not in self.topics:
                raise gexc.NotFound('Resource not found')
            del self.topics[request['topic']]

    def publish(self, topic, data, **attrs):
        if self.publish_raises is not None:
            raise self.publish_raises
        future = Future()
        if self.hold_publish:
            return future
        if self.publish_error is not None:
            future.set_exception(self.publish_error)
        elif topic not in self.topics:
            future.set_exception(gexc.NotFound('Resource not found'))
        else:
            self.published.append((topic, data, attrs))
            future.set_result(str(next(self._ids)))
        return future

    def create_count(self):
        return sum(1 for x in self.calls if x[0] == 'create_topic')


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def conn(publisher):
    return tc.connect(PubSubConfig(project_id='test-project', timeout=5.0), publisher=publisher)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # no stray .env file and no inherited settings
    monkeypatch.chdir(tmp_path)
    for x in ('GOOGLE_CLOUD_PROJECT', 'PUBSUB_TOPIC', 'PUBSUB_MESSAGE_COUNT',
              'PUBSUB_PUBLISH_INTERVAL', 'PUBSUB_TIMEOUT', 'LOG_LEVEL'):
        monkeypatch.setenv(x, '')               # so values loaded from .env are undone too
        monkeypatch.delenv(x)
    return monkeypatch
