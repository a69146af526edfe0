"""
MODULE_DESCRIPTION: Message Routes - Encrypted Chat Message Retrieval and Sending

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    GET  /chats/{chat_id}/messages   conversation history, decrypted for display
    POST /chats/{chat_id}/messages   send a psychologist message, encrypted at rest

Display path:
    every row -> MessageDisplayAdapter.process_incoming_message
        - envelopes are decrypted with the chat's key
        - legacy plaintext rows pass through unchanged
        - undecryptable rows render with a marker, never abort the response

Send path:
    content -> MessageSendAdapter.process_outgoing_message -> insert
        - the chat moves to `a_decorrer`
        - last_message_* fields of the chat are updated with the stored body
        - the stored row is echoed back through the display adapter, so the
          sender sees the same text the recipient will

===================================================================================
"""

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from fastapi import APIRouter, Depends, HTTPException

from api.baas.client import BaaSClient
from api.baas.factory import get_baas_client
from api.dependencies.auth import require_psicologo_user
from api.encryption.adapters import MessageDisplayAdapter, MessageSendAdapter
from api.encryption.service import MessageEncryptionService, get_encryption_service
from api.models.requests import SendMessageRequest
from api.routes.chat import load_chat, utc_now_iso
from api.utils.debug import print__chat_messages_debug

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter()


# ==============================================================================
# API ENDPOINT: GET CHAT MESSAGES
# ==============================================================================


@router.get("/chats/{chat_id}/messages")
async def get_chat_messages(
    chat_id: str,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    """Return the chat's non-deleted messages in chronological order.

    Raises:
        HTTPException 404: unknown chat
    """
    token = user["access_token"]
    await load_chat(baas, chat_id, token)

    rows = await baas.select(
        "messages",
        filters={"chat_id": chat_id, "is_deleted": False},
        order="created_at.asc",
        token=token,
    )

    display = MessageDisplayAdapter(service)
    messages = display.process_incoming_messages(rows, chat_id)

    print__chat_messages_debug(
        f"✅ Loaded {len(messages)} messages for chat {chat_id} "
        f"({sum(1 for r in rows if service.is_encrypted(r.get('content')))} encrypted)"
    )
    return {"success": True, "data": messages}


# ==============================================================================
# API ENDPOINT: SEND MESSAGE
# ==============================================================================


@router.post("/chats/{chat_id}/messages", status_code=201)
async def send_message(
    chat_id: str,
    body: SendMessageRequest,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    token = user["access_token"]
    chat = await load_chat(baas, chat_id, token)
    if chat.get("is_active") is False:
        raise HTTPException(status_code=409, detail="Chat is not active")

    stored_content = MessageSendAdapter(service).process_outgoing_message(
        body.content, chat_id
    )

    now = utc_now_iso()
    stored = await baas.insert(
        "messages",
        {
            "chat_id": chat_id,
            "sender_id": user["id"],
            "sender_type": "psicologo",
            "content": stored_content,
            "is_read": False,
            "is_deleted": False,
        },
        token=token,
    )

    # psychologist reply moves the chat to "a_decorrer"
    await baas.update(
        "chats",
        filters={"id": chat_id},
        payload={
            "status": "a_decorrer",
            "last_message_at": (stored or {}).get("created_at") or now,
            "last_message_content": stored_content,
            "last_message_sender_type": "psicologo",
            "updated_at": now,
        },
        token=token,
    )

    print__chat_messages_debug(
        f"📤 Message stored in chat {chat_id} (encrypted: {service.is_encrypted(stored_content)})"
    )
    echoed = MessageDisplayAdapter(service).process_incoming_message(
        stored or {"chat_id": chat_id, "content": stored_content}, chat_id
    )
    return {"success": True, "data": echoed}
