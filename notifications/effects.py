"""Post-commit side effects.

State transitions collect their notifications in an `EffectQueue`; the queue
hands them to the dispatcher only once the surrounding database transaction
has committed. A rolled-back transition therefore sends nothing, and a failed
notification never touches committed state.
"""

import logging
from contextlib import contextmanager
from functools import partial

from django.db import transaction

logger = logging.getLogger(__name__)


class EffectQueue:
    def __init__(self, notifier):
        self.notifier = notifier
        self._pending = []

    def notify(self, template_id, params):
        self._pending.append((template_id, dict(params)))

    def flush_on_commit(self):
        pending, self._pending = self._pending, []
        for template_id, params in pending:
            transaction.on_commit(partial(self._send, template_id, params), robust=True)

    def _send(self, template_id, params):
        if not self.notifier.send(template_id, params):
            logger.warning(
                "Notification %s for order %s was not delivered",
                template_id,
                params.get("order_code"),
            )


@contextmanager
def committing(notifier):
    """Run a block atomically and release its queued notifications after commit."""
    effects = EffectQueue(notifier)
    with transaction.atomic():
        yield effects
        effects.flush_on_commit()
