# app/services/chat_relay.py

import asyncio
from typing import Any, List, Optional

from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from app.core.logger import logger
from app.models.message import ChatMessage, SenderType
from app.schemas.chat import RelayResult, WebhookPayload
from app.services.webhook import WebhookClient, parse_reply
from app.utils.errors import BadRequestError, ForwardError, PersistenceError

HISTORY_LIMIT = 200


class ChatRelay:
    """
    Stores an inbound chat message, forwards it to the workflow webhook and
    stores the webhook's synchronous reply, if any.

    Holds no conversation state: the chat collection is the only record of
    history. One instance is built at startup and shared by all requests.
    """

    def __init__(self, messages, webhook: WebhookClient):
        self.messages = messages
        self.webhook = webhook
        # Strong refs so shielded forwards survive a cancelled caller
        self._inflight = set()

    async def relay(
        self,
        session_id: Optional[str],
        message: Optional[str],
        sender_type: SenderType = "human",
    ) -> RelayResult:
        if not session_id or not message:
            raise BadRequestError("sessionId and message are required")

        logger.info(f"Received message for session {session_id} (sender={sender_type})")

        inbound = ChatMessage(session_id=session_id, sender_type=sender_type, content=message)
        try:
            await self.messages.insert_one(inbound.to_document())
        except PyMongoError as e:
            logger.error(f"Error inserting message for session {session_id}: {e}")
            raise PersistenceError("Failed to save message") from e
        logger.info(f"Message saved for session {session_id}")

        # The inbound row is durable now, so the forward must not be abandoned
        task = asyncio.ensure_future(self._forward(inbound))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        task.add_done_callback(self._log_orphaned_failure)
        return await asyncio.shield(task)

    async def drain(self):
        """Wait for forwards still running after their callers went away."""
        if self._inflight:
            logger.info(f"Waiting for {len(self._inflight)} in-flight forward(s)")
            await asyncio.gather(*self._inflight, return_exceptions=True)

    @staticmethod
    def _log_orphaned_failure(task: asyncio.Task):
        # Retrieving the exception here keeps asyncio from reporting it as never retrieved
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Forward task failed: {exc}", exc_info=exc)

    async def _forward(self, inbound: ChatMessage) -> RelayResult:
        payload = WebhookPayload(
            session_id=inbound.session_id,
            message=inbound.content,
            sender_type=inbound.sender_type,
            timestamp=inbound.timestamp.isoformat(),
        )
        try:
            body = await run_in_threadpool(self.webhook.forward, payload)
        except ForwardError as e:
            logger.warning(f"Webhook failed for session {inbound.session_id}: {e}")
            return RelayResult(
                success=True,
                forwarded=False,
                message="Message saved but webhook failed",
            )

        reply = parse_reply(body)
        if reply is not None:
            await self._record_reply(inbound.session_id, reply)

        return RelayResult(
            success=True,
            forwarded=True,
            message="Message sent successfully",
            webhook_response=body if isinstance(body, dict) else None,
        )

    async def _record_reply(self, session_id: str, content: str):
        ai_message = ChatMessage(session_id=session_id, sender_type="ai", content=content)
        try:
            await self.messages.insert_one(ai_message.to_document())
            logger.info(f"AI response saved for session {session_id}")
        except Exception as e:
            logger.error(f"Error inserting AI message for session {session_id}: {e}", exc_info=True)

    async def history(self, session_id: str, limit: int = HISTORY_LIMIT) -> List[ChatMessage]:
        """The newest `limit` messages of one session, oldest first (store insertion order)."""
        try:
            cursor = self.messages.find({"session_id": session_id}).sort("_id", DESCENDING)
            docs: List[Any] = await cursor.to_list(length=limit)
            docs.reverse()
        except PyMongoError as e:
            logger.error(f"Error loading messages for session {session_id}: {e}")
            raise PersistenceError("Failed to load messages") from e

        history = []
        for doc in docs:
            try:
                history.append(ChatMessage.from_document(doc))
            except (KeyError, ValidationError):
                logger.warning(f"Skipping malformed chat row {doc.get('_id')} in session {session_id}")
        return history
