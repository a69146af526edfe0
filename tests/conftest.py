"""Shared fixtures: deterministic environment, in-memory BaaS and an in-process client."""

import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# Settings are read at import time, so the environment goes first
os.environ["SUPABASE_URL"] = "http://baas.test"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "service-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-supabase-jwt-secret-0123456789abcdef"
os.environ["CHAT_ENCRYPTION_KEY"] = "test-chat-encryption-secret"
os.environ["BAAS_RETRY_ATTEMPTS"] = "3"

import httpx
import pytest
import pytest_asyncio

from api.auth.profiles import invalidate_profile_cache
from api.baas.factory import get_baas_client
from api.config import settings
from api.encryption import MessageEncryptionService, get_encryption_service
from api.main import app
from tests.helpers import (
    APP_USER_ID,
    CMS_USER_ID,
    PSICOLOGO_2_ID,
    PSICOLOGO_ID,
    TEST_CHAT_SECRET,
    TEST_JWT_SECRET,
    UNAUTHORIZED_PSICOLOGO_ID,
    FakeBaaSClient,
)


def seed_tables(service: MessageEncryptionService) -> dict:
    tampered = service.encrypt_message("segredo", "chat-42")
    tampered = tampered[:-6] + ("A" if tampered[-6] != "A" else "B") + tampered[-5:]
    return {
        "profiles": [
            {"id": PSICOLOGO_ID, "name": "Ana", "username": "ana", "user_role": "psicologo",
             "authorized": True, "is_online": True, "updated_at": "2026-06-01T10:00:00+00:00"},
            {"id": PSICOLOGO_2_ID, "name": "Bruno", "username": "bruno", "user_role": "psicologo",
             "authorized": True, "is_online": False, "updated_at": "2026-06-01T09:00:00+00:00"},
            {"id": UNAUTHORIZED_PSICOLOGO_ID, "name": "Carla", "username": "carla",
             "user_role": "psicologo", "authorized": False, "is_online": True},
            {"id": CMS_USER_ID, "name": "Diana", "username": "diana", "user_role": "cms",
             "authorized": True, "is_online": False},
            {"id": APP_USER_ID, "name": "Eva", "username": "eva", "user_role": "app",
             "authorized": True, "is_online": True},
        ],
        "chats": [
            {"id": "chat-42", "app_user_id": APP_USER_ID, "status": "novo_chat", "is_active": True,
             "assigned_psicologo_id": None, "assigned_at": None, "unread_count_psicologo": 2,
             "last_message_at": "2026-06-01T12:00:00+00:00",
             "last_message_content": service.encrypt_message("Olá, tudo bem?", "chat-42"),
             "last_message_sender_type": "app_user"},
            {"id": "chat-7", "app_user_id": APP_USER_ID, "status": "follow_up", "is_active": True,
             "assigned_psicologo_id": PSICOLOGO_2_ID, "assigned_at": "2026-05-30T08:00:00+00:00",
             "unread_count_psicologo": 0, "last_message_at": "2026-05-30T08:00:00+00:00",
             "last_message_content": "Hello", "last_message_sender_type": "psicologo"},
            {"id": "chat-closed", "app_user_id": APP_USER_ID, "status": "encerrado",
             "is_active": False, "assigned_psicologo_id": None, "unread_count_psicologo": 0,
             "last_message_at": None, "last_message_content": None},
        ],
        "messages": [
            {"id": "m1", "chat_id": "chat-42", "sender_id": APP_USER_ID, "sender_type": "app_user",
             "content": service.encrypt_message("Olá, tudo bem?", "chat-42"),
             "is_read": False, "is_deleted": False, "created_at": "2026-06-01T11:00:00+00:00"},
            {"id": "m2", "chat_id": "chat-42", "sender_id": PSICOLOGO_ID, "sender_type": "psicologo",
             "content": "Hello", "is_read": True, "is_deleted": False,
             "created_at": "2026-06-01T11:30:00+00:00"},
            {"id": "m3", "chat_id": "chat-42", "sender_id": APP_USER_ID, "sender_type": "app_user",
             "content": tampered, "is_read": False, "is_deleted": False,
             "created_at": "2026-06-01T12:00:00+00:00"},
            {"id": "m4", "chat_id": "chat-42", "sender_id": APP_USER_ID, "sender_type": "app_user",
             "content": "apagada", "is_read": False, "is_deleted": True,
             "created_at": "2026-06-01T11:45:00+00:00"},
            {"id": "m5", "chat_id": "chat-7", "sender_id": APP_USER_ID, "sender_type": "app_user",
             "content": service.encrypt_message("Outra conversa", "chat-7"),
             "is_read": False, "is_deleted": False, "created_at": "2026-05-30T07:00:00+00:00"},
        ],
        "contacts": [
            {"id": "contact-1", "title": "SOS Voz Amiga", "phone1": "213 544 545",
             "created_at": "2026-01-01T00:00:00+00:00"},
            {"id": "contact-2", "title": "Linha SNS 24", "phone1": "808 24 24 24",
             "created_at": "2026-02-01T00:00:00+00:00"},
        ],
        "cms_references": [
            {"id": "ref-1", "subject": "Ansiedade", "title": "Guia de respiração",
             "description": "Exercícios", "url": "https://example.org/respirar",
             "created_at": "2026-01-01T00:00:00+00:00"},
            {"id": "ref-2", "subject": "Depressão", "title": "Sinais de alerta",
             "description": "Quando procurar ajuda", "url": "https://example.org/alerta",
             "created_at": "2026-03-01T00:00:00+00:00"},
            {"id": "ref-3", "subject": "Ansiedade social", "title": "100% presente",
             "description": "Mindfulness", "url": "https://example.org/presente",
             "created_at": "2026-02-01T00:00:00+00:00"},
        ],
        "posts": [
            {"id": "post-1", "author_id": CMS_USER_ID, "title": "Respirar", "description": "Vídeo curto",
             "category": "Vídeo", "content": None, "content_url": "https://video.example/1",
             "file_path": None, "file_name": None, "file_type": None, "tags": ["calma"],
             "emotion_tags": ["ansiedade"], "is_published": False,
             "created_at": "2026-01-01T00:00:00+00:00"},
            {"id": "post-2", "author_id": CMS_USER_ID, "title": "Dormir bem", "description": "Podcast",
             "category": "Podcast", "content": None, "content_url": None,
             "file_path": "cms-diana/sono.mp3", "file_name": "sono.mp3", "file_type": "audio/mpeg",
             "tags": [], "emotion_tags": [], "is_published": True,
             "created_at": "2026-02-01T00:00:00+00:00"},
            {"id": "post-other", "author_id": "cms-other", "title": "Alheio", "description": "x",
             "category": "Artigo", "content_url": "https://example.org/a",
             "created_at": "2026-03-01T00:00:00+00:00"},
        ],
    }


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    invalidate_profile_cache()
    yield
    invalidate_profile_cache()


@pytest.fixture
def encryption_service():
    return MessageEncryptionService(secret=TEST_CHAT_SECRET)


@pytest.fixture
def fake_baas(encryption_service):
    return FakeBaaSClient(tables=seed_tables(encryption_service))


@pytest_asyncio.fixture
async def client(fake_baas, encryption_service):
    app.dependency_overrides[get_baas_client] = lambda: fake_baas
    app.dependency_overrides[get_encryption_service] = lambda: encryption_service
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()
