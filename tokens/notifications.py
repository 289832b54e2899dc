import logging

from django.conf import settings
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

logger = logging.getLogger(__name__)


def _whatsapp_number(phone_number):
    phone_number = phone_number.strip().replace(" ", "")
    if not phone_number.startswith("+"):
        phone_number = f"{settings.TWILIO_DEFAULT_COUNTRY_CODE}{phone_number}"
    return f"whatsapp:{phone_number}"


# =====================================
# SEND "TABLE READY" WHATSAPP
# =====================================

def send_table_ready_whatsapp(token):
    """
    Tell the customer their table is ready. Returns True when Twilio
    accepted the message; failures are logged and return False.
    """
    if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
        logger.warning("Twilio credentials missing; WhatsApp for %s not sent", token.token_number)
        return False

    table_number = token.assigned_table.table_number if token.assigned_table else None

    message_body = (
        f"Hi {token.customer_name}, your table is ready!\n\n"
        f"Token: {token.token_number}\n"
        + (f"Table: {table_number}\n" if table_number else "")
        + "\nPlease make your way to the host stand."
    )

    try:
        client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        message = client.messages.create(
            body=message_body,
            from_=settings.TWILIO_WHATSAPP_FROM,
            to=_whatsapp_number(token.phone_number),
        )
    except TwilioException as exc:
        logger.error("WhatsApp for %s failed: %s", token.token_number, exc)
        return False

    logger.info("WhatsApp sent for %s (sid %s)", token.token_number, message.sid)
    return True
