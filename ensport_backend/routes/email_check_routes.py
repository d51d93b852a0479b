# ensport_backend/routes/email_check_routes.py
# Admin-only check that the email provider and templates work end to end

from fastapi import APIRouter, Depends, HTTPException

from ensport_backend.core.auth import require_admin
from ensport_backend.core.errors import ValidationError
from ensport_backend.models.match_model import SampleEmailRequest
from ensport_backend.services.email_service import get_mailer
from ensport_backend.services.notification_service import send_sample_email
from ensport_backend.services.subscriber_service import normalize_email

router = APIRouter()


@router.post("/email-system", dependencies=[Depends(require_admin)])
async def send_test_email(payload: SampleEmailRequest, mailer=Depends(get_mailer)):
    if not payload.email_type or not payload.test_email:
        raise ValidationError("email_type and test_email are required")
    email = normalize_email(payload.test_email)

    outcome = await send_sample_email(mailer, payload.email_type, email)
    if not outcome.success:
        raise HTTPException(status_code=502, detail=f"Failed to send test email: {outcome.error}")

    return {
        "message": f"Test email ({payload.email_type}) sent",
        "email_type": payload.email_type,
        "sent_to": email,
        "success": True,
    }
