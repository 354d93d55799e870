"""The order state machine.

One table describes every status transition: from which statuses an operation
may start and which status it produces. The lifecycle functions consult this
table before writing anything.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from .models import Order

S = Order.Status

TERMINAL = frozenset({S.COMPLETED, S.CANCELLED})


@dataclass(frozen=True)
class Transition:
    name: str
    sources: FrozenSet[str]
    target: Optional[str]  # None: decided by the operation (bank payment routing)

    def allows(self, status: str) -> bool:
        return status in self.sources


TRANSITIONS = {
    t.name: t
    for t in (
        Transition("send_offer", frozenset({S.AWAITING_OFFER, S.OFFER_MADE}), S.OFFER_MADE),
        Transition("accept_offer", frozenset({S.OFFER_MADE}), S.AWAITING_PAYMENT),
        Transition("pay_by_card", frozenset({S.AWAITING_PAYMENT}), S.IN_PROGRESS),
        Transition("mark_bank_paid", frozenset({S.AWAITING_PAYMENT}), None),
        Transition(
            "confirm_bank_payment",
            frozenset({S.AWAITING_ACTOR_CONFIRMATION}),
            S.IN_PROGRESS,
        ),
        Transition(
            "admin_confirm_payment",
            frozenset({S.AWAITING_ADMIN_CONFIRMATION}),
            S.IN_PROGRESS,
        ),
        Transition(
            "deliver",
            frozenset(
                {
                    S.AWAITING_ACTOR_CONFIRMATION,
                    S.AWAITING_ADMIN_CONFIRMATION,
                    S.IN_PROGRESS,
                    S.PENDING_APPROVAL,
                }
            ),
            S.PENDING_APPROVAL,
        ),
        Transition("accept_delivery", frozenset({S.PENDING_APPROVAL}), S.COMPLETED),
        Transition("request_revision", frozenset({S.PENDING_APPROVAL}), S.IN_PROGRESS),
        Transition(
            "cancel",
            frozenset(set(S.values) - TERMINAL),
            S.CANCELLED,
        ),
    )
}

# Statuses a bank "mark as paid" may lead to, depending on the provider.
BANK_CONFIRMATION_TARGETS = frozenset(
    {S.AWAITING_ACTOR_CONFIRMATION, S.AWAITING_ADMIN_CONFIRMATION}
)


def get_transition(name: str) -> Transition:
    return TRANSITIONS[name]


def is_terminal(status: str) -> bool:
    return status in TERMINAL
