#!/usr/bin/python3

# Pub/Sub quickstart
#   lists the project's topics, makes sure the example topic exists,
#   then publishes session messages to it one interval apart

import logging
import sys
import time

from pubsub_tools import config as cfg
from pubsub_tools import messages as msgs
from pubsub_tools import topic_client as tc
from pubsub_tools.errors import ConfigError, PubSubToolsError
from pubsub_tools.log_tools import setup_logging

logger = logging.getLogger('quickstart')             # fixed name, also when run as __main__

def run(conn, config, sleep=time.sleep):

#   list all the topics from the project (all or nothing)

    print('Listing all topics from the project:')
    for x in list(tc.list_topics(conn)): print(x.path)

#   create the example topic if it is not there yet

    topic = tc.ensure_topic(conn, config.topic_name)

#   publish session messages, waiting for each acknowledgment before moving on

    published = []

    for x in range(config.message_count):

        if x > 0: sleep(config.publish_interval)

        session = msgs.new_session()
        pub = tc.publish(conn, topic.name, msgs.encode(session))

        logger.info('{} send'.format(session.sessionid),
                    extra={'extra_fields': {'message_id': pub.message_id, 'topic': topic.path}})
        print('Published session ' + session.sessionid + '. Here is the Message ID: ' + pub.message_id)

        published.append((session, pub))

    return published

def main():

    try:
        config = cfg.load_config()
    except ConfigError as e:
        print(e, file=sys.stderr)                    # fatal before any client is created
        return 1

    setup_logging(config.log_level)

    try:
        conn = tc.connect(config.pubsub)
        run(conn, config)
    except PubSubToolsError as e:
        logger.error('Quickstart failed: {}'.format(e), exc_info=True)
        return 1

    return 0

if __name__ == '__main__': sys.exit(main())
