from .config       import AppConfig, PubSubConfig, load_config
from .errors       import (PubSubToolsError, ConfigError, TransportError, Cancelled,
                           AlreadyExists, NotFound, PayloadTooLarge)
from .messages     import Session, new_session
from .topic_client import (Connection, Topic, PublishResult, PendingPublish, MAX_PAYLOAD_BYTES,
                           connect, get_topic_path, list_topics, topic_exists, ensure_topic,
                           create_topic, delete_topic, publish, publish_async)
