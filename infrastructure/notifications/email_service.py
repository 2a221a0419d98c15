"""
Email Notification Service
==========================

Sends order confirmations as multipart (text + HTML) email through Django's
configured email backend (SMTP, console, locmem, ...).
"""

import logging
from email.utils import make_msgid
from typing import Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from .interface import NotificationException, NotificationReceipt, NotificationServiceInterface, OrderConfirmationPayload

logger = logging.getLogger(__name__)

HTML_TEMPLATE = "storefront/emails/order_confirmation.html"
TEXT_TEMPLATE = "storefront/emails/order_confirmation.txt"


class EmailNotificationService(NotificationServiceInterface):
    """
    Order confirmation emails rendered from templates.

    Configuration (in settings.py):
        EMAIL_BACKEND / EMAIL_HOST / ...: Django email settings
        DEFAULT_FROM_EMAIL: Sender address
        STOREFRONT["STORE_NAME"], STOREFRONT["SUPPORT_EMAIL"]: Used in the templates
    """

    def __init__(self, from_email: Optional[str] = None):
        self.default_from = from_email or getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@example.com")
        config = getattr(settings, "STOREFRONT", {})
        self.store_name = config.get("STORE_NAME", "Storefront")
        self.support_email = config.get("SUPPORT_EMAIL", self.default_from)

    def send_order_confirmation(self, payload: OrderConfirmationPayload) -> NotificationReceipt:
        context = {
            **payload.to_context(),
            "store_name": self.store_name,
            "support_email": self.support_email,
        }

        try:
            subject = f"Order Confirmation #{payload.order_id}"
            html_content = render_to_string(HTML_TEMPLATE, context)
            text_content = render_to_string(TEXT_TEMPLATE, context)

            message_id = make_msgid()
            msg = EmailMultiAlternatives(
                subject=subject,
                body=text_content,
                from_email=self.default_from,
                to=[payload.recipient],
                headers={"Message-ID": message_id},
            )
            msg.attach_alternative(html_content, "text/html")
            num_sent = msg.send(fail_silently=False)

        except Exception as e:
            logger.error(f"Failed to send order confirmation for {payload.order_id}: {str(e)}")
            raise NotificationException(f"Order confirmation send failed: {str(e)}") from e

        if num_sent > 0:
            logger.info(f"Order confirmation for {payload.order_id} sent to {payload.recipient}")
            return NotificationReceipt(success=True, message_id=message_id, message="Confirmation email sent")

        logger.warning(f"Order confirmation for {payload.order_id} was not accepted by the email backend")
        return NotificationReceipt(success=False, message="Email backend accepted no messages")
