"""
MODULE_DESCRIPTION: Debug Routes - Encryption Pipeline Self Tests

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Diagnostics for the chat encryption pipeline, used by the CMS debug page.

    GET /encryption/self-test                   built-in self test
    GET /chats/{chat_id}/encryption/self-test   round trip with one chat's key

Both require an authorized psychologist (the only role that reads chats).
Neither returns key material.

===================================================================================
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies.auth import require_psicologo_user
from api.encryption.adapters import EncryptedChat
from api.encryption.service import (
    SELF_TEST_CHAT_ID,
    MessageEncryptionService,
    get_encryption_service,
)
from api.models.responses import SelfTestResponse
from api.utils.debug import print__encryption_debug

router = APIRouter()


@router.get("/encryption/self-test", response_model=SelfTestResponse)
async def encryption_self_test(
    chat_id: str = Query(SELF_TEST_CHAT_ID, min_length=1),
    _user=Depends(require_psicologo_user),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    print__encryption_debug(f"🔍 Running encryption self-test for {chat_id}")
    return service.run_self_test(chat_id)


@router.get("/chats/{chat_id}/encryption/self-test")
async def chat_encryption_self_test(
    chat_id: str,
    _user=Depends(require_psicologo_user),
    service: MessageEncryptionService = Depends(get_encryption_service),
):
    return EncryptedChat(chat_id, service).test_encryption()
