# Session messages published by the quickstart
#   Wire format is a JSON object with exactly two fields:
#     sessionid - UUID v4 string
#     timestamp - unix seconds (int) at send time

from collections import namedtuple
import json
import time
import uuid

Session = namedtuple('session', 'sessionid timestamp')

def new_session(clock=time.time):

    return Session(str(uuid.uuid4()), int(clock()))

def encode(session):

    body = {'sessionid': session.sessionid, 'timestamp': session.timestamp}
    return json.dumps(body, separators=(',', ':')).encode('utf-8')
