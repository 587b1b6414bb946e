"""Gemini-backed welcome messages and chatbot sessions.

Nothing here may block a member-facing flow: every failure is logged and a
static Indonesian fallback is returned instead.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Callable, Iterator, Optional

from google import genai
from google.genai import types

from ..core.config import Settings, get_settings
from ..core.errors import NotFoundError

logger = logging.getLogger(__name__)

CHAT_SYSTEM_INSTRUCTION = (
    'Anda adalah chatbot asisten virtual untuk "Martabak Juara". Anda ramah, membantu, dan sedikit humoris. '
    "Jawab pertanyaan seputar menu, promo, atau cara menjadi member. "
    "Jangan menjawab pertanyaan di luar topik martabak."
)
CHAT_GREETING = "Halo! Ada yang bisa saya bantu seputar Martabak Juara?"
CHAT_UNAVAILABLE = "Maaf, chatbot sedang tidak tersedia saat ini."
CHAT_ERROR = "Maaf, terjadi kesalahan. Coba lagi nanti."


def welcome_fallback(name: str) -> str:
    return f"Selamat datang di Klub Pecinta Martabak, {name}! Kami senang Anda bergabung."


def welcome_prompt(name: str) -> str:
    return (
        "Buat pesan selamat datang yang singkat, ramah, dan sedikit ceria untuk anggota baru "
        f'bernama "{name}" yang baru saja bergabung dengan "Klub Pecinta Martabak Juara". '
        "Sapa dengan namanya. Jangan lebih dari 2 kalimat."
    )


class GeminiAssistant:
    """Thin wrapper over the google-genai client."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self._settings.gemini_api_key)
        return self._client

    def generate_text(self, prompt: str) -> str:
        response = self._get_client().models.generate_content(
            model=self._settings.gemini_model,
            contents=prompt,
        )
        return response.text or ""

    def start_chat(self, system_instruction: str) -> Any:
        return self._get_client().chats.create(
            model=self._settings.gemini_model,
            config=types.GenerateContentConfig(system_instruction=system_instruction),
        )


def generate_welcome_message(assistant: Any, name: str) -> str:
    """Return a personalised welcome, or the static fallback on any failure."""

    try:
        message = assistant.generate_text(welcome_prompt(name))
    except Exception:
        logger.exception("welcome message generation failed")
        return welcome_fallback(name)

    if not message or not message.strip():
        logger.warning("assistant returned an empty welcome message")
        return welcome_fallback(name)
    return message.strip()


class ChatSessionRegistry:
    """In-process map of open chat sessions keyed by session id.

    Entries are kept in least-recently-used order. Sessions idle for longer
    than ``idle_ttl`` seconds are dropped, and opening a session beyond
    ``max_sessions`` evicts the least recently used one.
    """

    def __init__(
        self,
        *,
        max_sessions: int = 500,
        idle_ttl: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._max_sessions = max_sessions
        self._idle_ttl = idle_ttl
        self._clock = clock
        self._lock = threading.Lock()

    def _evict_idle(self, now: float) -> None:
        # Caller holds the lock.
        while self._sessions:
            session_id, (_, last_used) = next(iter(self._sessions.items()))
            if now - last_used < self._idle_ttl:
                break
            del self._sessions[session_id]
            logger.info("chat session %s expired", session_id)

    def open(self, assistant: Any) -> tuple[str, str, bool]:
        """Start a session; returns ``(session_id, greeting, available)``."""

        session_id = uuid.uuid4().hex
        try:
            chat = assistant.start_chat(CHAT_SYSTEM_INSTRUCTION)
        except Exception:
            logger.exception("failed to initialise chat session")
            return session_id, CHAT_UNAVAILABLE, False

        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            self._sessions[session_id] = (chat, now)
            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("chat session %s evicted, registry full", evicted)
        return session_id, CHAT_GREETING, True

    def get(self, session_id: str) -> Any:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            entry = self._sessions.get(session_id)
            if entry is not None:
                self._sessions[session_id] = (entry[0], now)
                self._sessions.move_to_end(session_id)
        if entry is None:
            raise NotFoundError(f"Chat session {session_id} not found")
        return entry[0]

    def close(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is None:
            raise NotFoundError(f"Chat session {session_id} not found")

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def stream_reply(self, session_id: str, message: str) -> Iterator[str]:
        """Yield reply chunks; a failed turn ends with the error message."""

        chat = self.get(session_id)

        def _chunks() -> Iterator[str]:
            try:
                for chunk in chat.send_message_stream(message):
                    text = getattr(chunk, "text", None)
                    if text:
                        yield text
            except Exception:
                logger.exception("chat session %s failed to reply", session_id)
                yield CHAT_ERROR

        return _chunks()


_assistant: GeminiAssistant | None = None
chat_sessions = ChatSessionRegistry(
    max_sessions=get_settings().chat_max_sessions,
    idle_ttl=get_settings().chat_session_ttl_seconds,
)


def get_assistant() -> GeminiAssistant:
    """Return the process-wide assistant; overridden in tests."""

    global _assistant
    if _assistant is None:
        _assistant = GeminiAssistant()
    return _assistant


def get_chat_sessions() -> ChatSessionRegistry:
    return chat_sessions
