# Logging for pubsub_tools and the jobs that use it
#   Modules log through plain logging.getLogger(__name__) and never attach handlers.
#   A job calls setup_logging() once; the level and the JSON handler then apply to
#   every logger under the configured top-level names.

import json
import logging
import sys
from datetime import datetime, timezone

PACKAGE_LOGGERS = ('pubsub_tools', 'quickstart')

class JSONFormatter(logging.Formatter):
    """One JSON object per line: when, level, logger, message, plus any extra_fields."""

    def format(self, record):

        entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ'),
            'level':     record.levelname,
            'logger':    record.name,
            'message':   record.getMessage(),
        }

        if record.exc_info: entry['exception'] = self.formatException(record.exc_info)

        # logger.info(..., extra={'extra_fields': {...}})
        entry.update(getattr(record, 'extra_fields', {}))

        return json.dumps(entry, default=str)

class StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time, so redirected streams are honoured."""

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr

def setup_logging(level='INFO', names=PACKAGE_LOGGERS):

    level = getattr(logging, str(level).upper(), logging.INFO)

    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False

        if not any(isinstance(x, StderrHandler) for x in logger.handlers):   # idempotent across calls
            handler = StderrHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
