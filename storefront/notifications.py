"""
Order e-mails: a confirmation for the customer and a notification for the store.

Messages are posted as JSON ({to, subject, html}) to the e-mail service
configured in EMAIL_SERVICE_URL.
"""
import logging

import requests
from flask import render_template

from storefront.locations import currency_symbol_for

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    pass


def http_post_json(url, payload, timeout=10):
    return requests.post(url, json=payload, timeout=timeout)


def _send(service_url, recipients, subject, html):
    try:
        response = http_post_json(service_url, {"to": recipients, "subject": subject, "html": html})
    except requests.exceptions.RequestException as exc:
        raise NotificationError(f"E-mail service unreachable: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise NotificationError(f"E-mail service answered {response.status_code}: {response.text}")
    return response


def render_order_emails(order):
    customer = order["customerDetails"]
    context = {
        "order": order,
        "customer": customer,
        "customer_name": f"{customer['firstName']} {customer['lastName']}".strip(),
        "currency_symbol": currency_symbol_for(customer.get("country")),
        "order_date": order["date"][:10],
    }
    return (
        render_template("emails/customer_confirmation.html", **context),
        render_template("emails/admin_notification.html", **context),
    )


def send_order_emails(order, service_url, admin_email):
    """Send both order e-mails. Must run inside an application context."""
    customer_html, admin_html = render_order_emails(order)
    order_id = order["orderId"]

    _send(service_url, [order["customerDetails"]["email"]], f"Order Confirmation - #{order_id}", customer_html)
    logger.info("Confirmation e-mail sent for order %s", order_id)

    _send(service_url, [admin_email], f"New Order Received - #{order_id}", admin_html)
    logger.info("Admin notification sent for order %s", order_id)
