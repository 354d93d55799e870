"""E-mail templates for lifecycle notifications.

Each template id maps to a subject and a plain-text body. Placeholders use
`str.format` syntax; unknown placeholders are left as they are.
"""

NEW_QUOTE_REQUEST = "new_quote_request"
NEW_DIRECT_ORDER = "new_direct_order"
ORDER_CONFIRMATION = "order_confirmation"
NEW_OFFER = "new_offer"
OFFER_UPDATED = "offer_updated"
OFFER_ACCEPTED = "offer_accepted"
PAYMENT_RECEIVED = "payment_received"
BANK_TRANSFER_MARKED = "bank_transfer_marked"
WORK_STARTED = "work_started"
NEW_DELIVERY = "new_delivery"
REVISION_REQUESTED = "revision_requested"
NEW_MESSAGE = "new_message"

TEMPLATES = {
    NEW_QUOTE_REQUEST: (
        "New quote request {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} requested a quote for {service_type} (order {order_code}).\n"
        "Open the order to send your offer.",
    ),
    NEW_DIRECT_ORDER: (
        "New order {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} placed a voice-over order {order_code} "
        "({word_count} words, {usage} usage) for {total_price}.\n"
        "Payment method: {payment_method}.",
    ),
    ORDER_CONFIRMATION: (
        "Your order {order_code} with {provider_name}",
        "Hello {recipient_name},\n\n"
        "Thank you for your order {order_code}. Total: {total_price}.\n"
        "You can follow its progress on your order page.",
    ),
    NEW_OFFER: (
        "New offer for {order_code}",
        "Hello {recipient_name},\n\n"
        "{provider_name} sent you an offer \"{offer_title}\" for {offer_price}.\n\n"
        "{offer_agreement}",
    ),
    OFFER_UPDATED: (
        "Updated offer for {order_code}",
        "Hello {recipient_name},\n\n"
        "{provider_name} updated the offer \"{offer_title}\" to {offer_price}.\n\n"
        "{offer_agreement}",
    ),
    OFFER_ACCEPTED: (
        "Offer accepted for {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} accepted your offer for {total_price}. "
        "The order is now awaiting payment.",
    ),
    PAYMENT_RECEIVED: (
        "Payment received for {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} paid {total_price} by card. You can start working on the order.",
    ),
    BANK_TRANSFER_MARKED: (
        "Bank transfer sent for {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} ({client_email}) reports having sent {total_price} to your bank "
        "account. Please confirm once you have received it.",
    ),
    WORK_STARTED: (
        "Work has started on {order_code}",
        "Hello {recipient_name},\n\n"
        "The payment for order {order_code} was confirmed and {provider_name} "
        "has started working on it.",
    ),
    NEW_DELIVERY: (
        "New delivery for {order_code}",
        "Hello {recipient_name},\n\n"
        "{provider_name} delivered version {version_number} of your order {order_code}. "
        "Please review it and approve or request a revision.",
    ),
    REVISION_REQUESTED: (
        "Revision requested for {order_code}",
        "Hello {recipient_name},\n\n"
        "{client_name} requested a revision for order {order_code}. "
        "Revisions left: {revisions_left}.",
    ),
    NEW_MESSAGE: (
        "New message on order {order_code}",
        "Hello {recipient_name},\n\n"
        "{sender_name} sent you a message about order {order_code}.",
    ),
}


class _Placeholders(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render(template_id, params):
    """Return (subject, body) for a template id; KeyError for unknown ids."""
    subject, body = TEMPLATES[template_id]
    values = _Placeholders(params)
    return subject.format_map(values), body.format_map(values)
