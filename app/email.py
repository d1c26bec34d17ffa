import logging
import os

import resend

logger = logging.getLogger("lfg")


def send_trip_created(email: str, trip_title: str, trip_id: str):
    api_key = os.getenv("RESEND_API_KEY")
    if not api_key:
        return

    resend.api_key = api_key
    frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000")
    trip_url = f"{frontend_url}/trips/{trip_id}"

    resend.Emails.send({
        "from": os.getenv("EMAIL_FROM", "onboarding@resend.dev"),
        "to": [email],
        "subject": f"Your trip: {trip_title}",
        "html": (
            f"<p>Your trip <strong>{trip_title}</strong> is live!</p>"
            f'<p><a href="{trip_url}">Open your trip</a> and share it with your squad.</p>'
            f"<p style=\"color:#888;font-size:12px\">Travelers who ask to join will show up under Participants.</p>"
        ),
    })
    logger.info("Trip email sent", extra={"extra_data": {"trip_id": trip_id}})
