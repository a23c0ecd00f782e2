# Abstraction Layer for Pub/Sub topic management and publishing
#   Obscures some of the stranger GCP implementation decisions (request dicts, pagers, futures)
#   Standardises approach to executing common functions
#   Translates google.api_core exceptions into pubsub_tools.errors

from collections  import namedtuple
from concurrent   import futures
import logging
from google.api_core import exceptions as gexc
from google.auth import exceptions as auth_exc
from google.cloud import pubsub_v1
from google.cloud.pubsub_v1.publisher import exceptions as pub_exc

from .errors     import AlreadyExists, ConfigError, PayloadTooLarge, TransportError, translate

logger = logging.getLogger(__name__)

MAX_PAYLOAD_BYTES = 10000000                         # service limit for a single message request (data, attributes and framing)
RESERVED_ATTRIBUTES = ('ordering_key', 'retry', 'timeout')          # PublisherClient.publish keyword options

Connection    = namedtuple('connection', 'publisher project_id timeout')
Topic         = namedtuple('topic', 'name path')
PublishResult = namedtuple('pub_result', 'message_id topic')

################################################################
# Connection
################################################################

def connect(config, publisher=None):
    """Create a Connection for config.project_id.

    No SDK client is constructed when the project id is missing. Pass
    publisher to reuse an existing PublisherClient.
    """
    project_id = (config.project_id or '').strip()
    if not project_id: raise ConfigError('A project id is required to connect to Pub/Sub')

    if publisher is None:
        try:
            publisher = pubsub_v1.PublisherClient()
        except (gexc.GoogleAPIError, auth_exc.GoogleAuthError) as e:   # e.g. DefaultCredentialsError
            raise translate(e, 'Creating the publisher client') from e

    logger.debug('Connected to Pub/Sub project {}'.format(project_id))
    return Connection(publisher, project_id, config.timeout)

def get_topic_path(conn, topic_name):

    if not topic_name or not topic_name.strip(): raise ValueError('Topic name must not be blank')

    return conn.publisher.topic_path(conn.project_id, topic_name)

def _timeout(conn, timeout):

    return conn.timeout if timeout is None else timeout

################################################################
# Topics: List / Exists / Create / Delete
################################################################

def list_topics(conn, timeout=None):
    """Yield every Topic in the project, one page at a time.

    Each call starts a fresh listing. A failed page fetch raises TransportError,
    so callers wanting all-or-nothing should materialise with list().
    """
    project_path = 'projects/' + conn.project_id

    try:
        pager = conn.publisher.list_topics(request={'project': project_path}, timeout=_timeout(conn, timeout))
        for page in pager.pages:                           # each page fetch is a separate round trip
            for x in page.topics:
                yield Topic(x.name.rsplit('/', 1)[-1], x.name)
    except gexc.GoogleAPIError as e:
        err = translate(e, 'Listing topics in {}'.format(project_path))
        if not isinstance(err, TransportError): err = TransportError(str(err))   # e.g. NotFound for an unknown project
        raise err from e

def topic_exists(conn, topic_name, timeout=None):

    topic_path = get_topic_path(conn, topic_name)

    try:
        conn.publisher.get_topic(request={'topic': topic_path}, timeout=_timeout(conn, timeout))
    except gexc.NotFound:
        return False
    except gexc.GoogleAPIError as e:
        raise translate(e, 'Checking topic {}'.format(topic_path)) from e

    return True

def create_topic(conn, topic_name, timeout=None):

    topic_path = get_topic_path(conn, topic_name)

    try:
        conn.publisher.create_topic(request={'name': topic_path}, timeout=_timeout(conn, timeout))
    except gexc.GoogleAPIError as e:
        raise translate(e, 'Creating topic {}'.format(topic_path)) from e

    logger.info('Topic created: {}'.format(topic_path))
    return Topic(topic_name, topic_path)

def ensure_topic(conn, topic_name, timeout=None):
    """Return the topic, creating it first if it does not exist.

    Losing a creation race to another caller is not an error: an AlreadyExists
    answer to the create means the topic is there, which is all we need.
    """
    if topic_exists(conn, topic_name, timeout):
        return Topic(topic_name, get_topic_path(conn, topic_name))

    try:
        return create_topic(conn, topic_name, timeout)
    except AlreadyExists:
        logger.debug('Topic {} was created concurrently'.format(topic_name))
        return Topic(topic_name, get_topic_path(conn, topic_name))

def delete_topic(conn, topic_name, timeout=None):

    topic_path = get_topic_path(conn, topic_name)

    try:
        conn.publisher.delete_topic(request={'topic': topic_path}, timeout=_timeout(conn, timeout))
    except gexc.GoogleAPIError as e:
        raise translate(e, 'Deleting topic {}'.format(topic_path)) from e

    logger.info('Deleted topic: {}'.format(topic_path))

################################################################
# Pubsub: Publish
################################################################

class PendingPublish:
    """A publish handed to the client's batcher but not yet acknowledged.

    result() blocks until the broker assigns a message id.
    """

    def __init__(self, future, topic, timeout):
        self.future = future
        self.topic = topic
        self.timeout = timeout

    def done(self):
        return self.future.done()

    def result(self, timeout=None):

        if timeout is None: timeout = self.timeout

        try:
            message_id = self.future.result(timeout=timeout)
        except (gexc.GoogleAPIError, futures.TimeoutError) as e:
            raise translate(e, 'Publish to {}'.format(self.topic.path)) from e

        return PublishResult(message_id, self.topic)

def _encode(payload):

    if isinstance(payload, str): payload = payload.encode('utf-8')   # encode to a bytestring
    if not isinstance(payload, bytes): raise TypeError('Payload must be bytes or str, got {}'.format(type(payload).__name__))

    if len(payload) > MAX_PAYLOAD_BYTES:
        raise PayloadTooLarge('Payload of {} bytes exceeds the {} byte limit'.format(len(payload), MAX_PAYLOAD_BYTES))

    return payload

def publish_async(conn, topic_name, payload, attributes=None):
    """Queue payload for publishing to topic_name without waiting for the ack.

    The topic is not created if it is missing; the returned PendingPublish
    fails with NotFound instead.
    """
    data = _encode(payload)
    attributes = dict(attributes or {})

    for k, v in attributes.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ValueError('Message attributes must be str -> str, got {!r}: {!r}'.format(k, v))
        if k in RESERVED_ATTRIBUTES:
            raise ValueError('Attribute name {!r} is reserved by the publisher client'.format(k))

    topic = Topic(topic_name, get_topic_path(conn, topic_name))

    try:
        outcome = conn.publisher.publish(topic.path, data, **attributes)   # returns a 'future' object
    except pub_exc.MessageTooLargeError as e:          # whole request over the limit, not just data
        raise PayloadTooLarge('Publish to {} rejected: {}'.format(topic.path, e)) from e
    except gexc.GoogleAPIError as e:
        raise translate(e, 'Publish to {}'.format(topic.path)) from e

    return PendingPublish(outcome, topic, conn.timeout)

def publish(conn, topic_name, payload, attributes=None, timeout=None):
    """Publish payload and block until the broker acknowledges it.

    Not idempotent: on Cancelled or TransportError the message may still have
    been accepted broker-side.
    """
    return publish_async(conn, topic_name, payload, attributes).result(timeout)
