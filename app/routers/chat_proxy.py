# app/routers/chat_proxy.py

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.logger import logger
from app.routers.deps import get_chat_relay, get_patients_collection
from app.schemas.chat import HistoryMessage, RelayRequest, SessionHistory
from app.services.chat_relay import HISTORY_LIMIT, ChatRelay
from app.services.patients import find_patient_by_phone
from app.utils.errors import InternalServerError, NotFoundError
from app.utils.responses import format_response

router = APIRouter(tags=["chat-proxy"])


@router.post("", summary="Save a chat message and forward it to the workflow webhook")
async def relay_message(req: RelayRequest, relay: ChatRelay = Depends(get_chat_relay)):
    try:
        result = await relay.relay(req.session_id, req.message, req.sender_type)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error in chat-proxy")
        raise InternalServerError(str(e))

    body = {
        "success": result.success,
        "forwarded": result.forwarded,
        "message": result.message,
    }
    if result.forwarded:
        body["webhookResponse"] = result.webhook_response
    else:
        body["error"] = "webhook error"
    return body


@router.get("/sessions/{session_id}/messages", summary="List the messages of one chat session")
async def list_session_messages(
    session_id: str,
    limit: int = Query(default=HISTORY_LIMIT, gt=0, le=1000),
    relay: ChatRelay = Depends(get_chat_relay),
):
    messages = await relay.history(session_id, limit=limit)
    history = SessionHistory(
        session_id=session_id,
        messages=[HistoryMessage(**m.model_dump()) for m in messages],
    )
    return format_response(success=True, data=history.model_dump(mode="json"))


@router.get("/sessions/{session_id}/patient", summary="Find the patient behind a chat session")
async def get_session_patient(session_id: str, patients=Depends(get_patients_collection)):
    patient = await find_patient_by_phone(patients, session_id)
    if not patient:
        raise NotFoundError(f"No patient registered with phone '{session_id}'")
    return format_response(success=True, data={"patient": patient.model_dump(mode="json")})
