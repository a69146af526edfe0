"""
MODULE_DESCRIPTION: Chat Routes - Psychologist Chat List, Status and Assignment

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Endpoints used by the psychologist chat inbox of the CMS. All of them require
an authorized `psicologo` profile.

    GET    /chats                     chat list, newest activity first
    GET    /chats/{chat_id}           chat info
    PATCH  /chats/{chat_id}/status    move a chat through its lifecycle
    POST   /chats/{chat_id}/assign    self-assign the chat
    DELETE /chats/{chat_id}/assign    release the chat (only the assignee)
    POST   /chats/{chat_id}/read      mark the app user's messages as read

Chat lifecycle:
    novo_chat -> a_decorrer -> follow_up -> encerrado

Encryption:
    `last_message_content` holds the stored (encrypted) body of the last
    message. Every preview goes through MessageDisplayAdapter before it is
    returned, exactly like the message bodies in api.routes.messages.

===================================================================================
"""

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.dependencies.auth import require_psicologo_user
from api.encryption.adapters import MessageDisplayAdapter
from api.encryption.service import MessageEncryptionService, get_encryption_service
from api.models.requests import ChatStatusUpdateRequest
from api.utils.debug import print__chat_messages_debug

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter()


# ==============================================================================
# SHARED HELPERS
# ==============================================================================


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def load_chat(baas: BaaSClient, chat_id: str, token: str) -> dict:
    """Fetch one chat row or raise 404."""
    try:
        return await baas.select("chats", filters={"id": chat_id}, single=True, token=token)
    except BaaSError as exc:
        if exc.status_code == 404:
            raise HTTPException(status_code=404, detail="Chat not found")
        raise


def with_display_preview(chat: dict, display: MessageDisplayAdapter) -> dict:
    return {
        **chat,
        "last_message_content": display.process_preview(
            chat.get("last_message_content"), chat["id"]
        ),
    }


# ==============================================================================
# API ENDPOINT: CHAT LIST
# ==============================================================================


@router.get("/chats")
async def list_chats(
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    """List chats visible to the psychologist, newest activity first.

    Row-level security decides which chats the caller can see.
    """
    chats = await baas.select(
        "chats",
        order="last_message_at.desc.nullslast",
        token=user["access_token"],
    )
    display = MessageDisplayAdapter(service)
    print__chat_messages_debug(f"📥 Loaded {len(chats)} chats for {user['id']}")
    return {"success": True, "data": [with_display_preview(c, display) for c in chats]}


# ==============================================================================
# API ENDPOINT: CHAT INFO
# ==============================================================================


@router.get("/chats/{chat_id}")
async def get_chat(
    chat_id: str,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    chat = await load_chat(baas, chat_id, user["access_token"])
    return {
        "success": True,
        "data": with_display_preview(chat, MessageDisplayAdapter(service)),
    }


# ==============================================================================
# API ENDPOINT: CHAT STATUS
# ==============================================================================


@router.patch("/chats/{chat_id}/status")
async def update_chat_status(
    chat_id: str,
    body: ChatStatusUpdateRequest,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    rows = await baas.update(
        "chats",
        filters={"id": chat_id},
        payload={"status": body.status, "updated_at": utc_now_iso()},
        token=user["access_token"],
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Chat not found")

    print__chat_messages_debug(f"🔄 Chat {chat_id} status -> {body.status}")
    return {"success": True, "data": {"id": chat_id, "status": body.status}}


# ==============================================================================
# API ENDPOINTS: ASSIGNMENT
# ==============================================================================


@router.post("/chats/{chat_id}/assign")
async def assign_chat(
    chat_id: str,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    """Assign the chat to the calling psychologist."""
    chat = await load_chat(baas, chat_id, user["access_token"])
    current = chat.get("assigned_psicologo_id")
    if current and current != user["id"]:
        raise HTTPException(
            status_code=409, detail="Chat is already assigned to another psychologist"
        )

    assigned_at = utc_now_iso()
    await baas.update(
        "chats",
        filters={"id": chat_id},
        payload={
            "assigned_psicologo_id": user["id"],
            "assigned_at": assigned_at,
            "updated_at": assigned_at,
        },
        token=user["access_token"],
    )
    print__chat_messages_debug(f"✅ Chat {chat_id} assigned to {user['id']}")
    return {
        "success": True,
        "data": {"id": chat_id, "assigned_psicologo_id": user["id"], "assigned_at": assigned_at},
    }


@router.delete("/chats/{chat_id}/assign")
async def unassign_chat(
    chat_id: str,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    """Release the chat. Only the current assignee can do this."""
    chat = await load_chat(baas, chat_id, user["access_token"])
    if chat.get("assigned_psicologo_id") != user["id"]:
        raise HTTPException(status_code=403, detail="Chat is not assigned to you")

    await baas.update(
        "chats",
        filters={"id": chat_id},
        payload={
            "assigned_psicologo_id": None,
            "assigned_at": None,
            "updated_at": utc_now_iso(),
        },
        token=user["access_token"],
    )
    print__chat_messages_debug(f"✅ Chat {chat_id} released by {user['id']}")
    return {"success": True, "data": {"id": chat_id, "assigned_psicologo_id": None}}


# ==============================================================================
# API ENDPOINT: MARK AS READ
# ==============================================================================


@router.post("/chats/{chat_id}/read")
async def mark_messages_as_read(
    chat_id: str,
    user=Depends(require_psicologo_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    """Mark every unread app-user message of the chat as read."""
    updated = await baas.update(
        "messages",
        filters={"chat_id": chat_id, "sender_type": "app_user", "is_read": False},
        payload={"is_read": True},
        token=user["access_token"],
    )
    await baas.update(
        "chats",
        filters={"id": chat_id},
        payload={"unread_count_psicologo": 0},
        token=user["access_token"],
    )
    print__chat_messages_debug(f"👁 Marked {len(updated)} messages read in chat {chat_id}")
    return {"success": True, "data": {"updated": len(updated)}}
