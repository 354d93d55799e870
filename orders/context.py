"""Collaborators the order lifecycle works with.

Every lifecycle function receives a `Context` explicitly. `default_context()`
builds one from the configured dispatcher and payment gateway classes.
"""

from dataclasses import dataclass

from django.conf import settings
from django.utils.module_loading import import_string

from .store import OrderRecordStore


@dataclass
class Context:
    store: OrderRecordStore
    notifier: object
    payment_gateway: object


def default_context() -> Context:
    return Context(
        store=OrderRecordStore(),
        notifier=import_string(settings.NOTIFICATION_DISPATCHER)(),
        payment_gateway=import_string(settings.PAYMENT_GATEWAY)(),
    )
