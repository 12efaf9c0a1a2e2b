"""
Delivery gateway: hands one rendered email to Django's mail backend and
records the attempt as an OutgoingEmail row.
"""

import logging
import re
from typing import Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.html import strip_tags

from workflows.exceptions import DeliveryFailure
from workflows.recipients import Recipient
from .models import OutgoingEmail

logger = logging.getLogger(__name__)

HTML_TAG_RE = re.compile(r'<[a-zA-Z/!][^>]*>')


class EmailDeliveryGateway:
    """Sends workflow emails, bounding each attempt by a timeout"""

    def __init__(self, timeout: Optional[int] = None, from_email: Optional[str] = None):
        self.timeout = timeout if timeout is not None else settings.WORKFLOW_DELIVERY_TIMEOUT
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(self, recipient: Recipient, subject: str, body: str, workflow=None,
             trigger_event: str = '', is_test: bool = False) -> Optional[OutgoingEmail]:
        """
        Deliver a single message.

        Returns the OutgoingEmail log row on success, or None when the row
        could not be written, and raises DeliveryFailure when the transport
        errors, times out or accepts nothing. Failed attempts are logged too.
        """
        # Mail headers cannot carry line breaks, rendered variables might
        subject = ' '.join((subject or '').splitlines()).strip()
        message = self._build_message(recipient, subject, body)

        try:
            sent = message.send(fail_silently=False)
            if not sent:
                raise DeliveryFailure(recipient.email, 'transport accepted no messages')
        except DeliveryFailure as failure:
            self._log(recipient, subject, body, workflow, trigger_event, is_test, error=failure.reason)
            raise
        except TimeoutError:
            reason = f'timed out after {self.timeout}s'
            logger.error(f"⏱️ Email to {recipient.email} {reason}")
            self._log(recipient, subject, body, workflow, trigger_event, is_test, error=reason)
            raise DeliveryFailure(recipient.email, reason)
        except Exception as e:
            logger.error(f"❌ Failed to send email to {recipient.email}: {str(e)}")
            self._log(recipient, subject, body, workflow, trigger_event, is_test, error=str(e))
            raise DeliveryFailure(recipient.email, str(e)) from e

        logger.info(f"✅ Email '{subject}' sent to: {recipient.email}")
        return self._log(recipient, subject, body, workflow, trigger_event, is_test)

    def _build_message(self, recipient: Recipient, subject: str, body: str) -> EmailMultiAlternatives:
        connection = get_connection(timeout=self.timeout)
        is_html = bool(HTML_TAG_RE.search(body or ''))

        message = EmailMultiAlternatives(
                    subject=subject,
                    body=strip_tags(body) if is_html else body,
            from_email=self.from_email,
            to=[recipient.formatted()],
            connection=connection,
        )
        if is_html:
            message.attach_alternative(body, 'text/html')
        return message

    def _log(self, recipient, subject, body, workflow, trigger_event, is_test, error=''):
        # The outcome of the send stands even when the log row cannot be written
        try:
            with transaction.atomic():
                return OutgoingEmail.objects.create(
                    to_address=recipient.email,
                    subject=subject[:255],
                    body=body,
                    workflow=workflow if workflow is not None and workflow.pk else None,
                    trigger_event=trigger_event,
                    is_test=is_test,
                    status=OutgoingEmail.STATUS_FAILED if error else OutgoingEmail.STATUS_SENT,
                    error=error,
                    sent_at=None if error else timezone.now(),
                    meta={'recipient_name': recipient.name} if recipient.name else None,
                )
        except DatabaseError:
            logger.exception(f"Could not record email to {recipient.email}")
            return None
