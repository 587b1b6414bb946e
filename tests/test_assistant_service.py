import pytest

from juara_loyalty.core.errors import NotFoundError
from juara_loyalty.services.assistant_service import (
    CHAT_ERROR,
    CHAT_GREETING,
    CHAT_UNAVAILABLE,
    ChatSessionRegistry,
    generate_welcome_message,
    welcome_fallback,
)


def test_welcome_message_uses_assistant_text(assistant) -> None:
    assistant.welcome = "  Halo Siti, selamat datang!  "

    assert generate_welcome_message(assistant, "Siti") == "Halo Siti, selamat datang!"
    assert '"Siti"' in assistant.prompts[0]


def test_welcome_message_falls_back_on_error(assistant) -> None:
    assistant.fail_welcome = True

    assert generate_welcome_message(assistant, "Siti") == welcome_fallback("Siti")


def test_welcome_message_falls_back_on_empty_text(assistant) -> None:
    assistant.welcome = "   "

    assert generate_welcome_message(assistant, "Siti") == (
        "Selamat datang di Klub Pecinta Martabak, Siti! Kami senang Anda bergabung."
    )


def test_chat_session_streams_reply(assistant) -> None:
    registry = ChatSessionRegistry()
    session_id, greeting, available = registry.open(assistant)

    assert available and greeting == CHAT_GREETING
    assert "".join(registry.stream_reply(session_id, "Ada promo?")) == "Martabak manis tersedia!"
    assert assistant.chats[0].messages == ["Ada promo?"]


def test_chat_stream_failure_ends_with_error_message(assistant) -> None:
    assistant.fail_stream = True
    registry = ChatSessionRegistry()
    session_id, _, _ = registry.open(assistant)

    chunks = list(registry.stream_reply(session_id, "Halo"))
    assert chunks[-1] == CHAT_ERROR


def test_chat_unavailable_when_session_cannot_start(assistant) -> None:
    assistant.fail_chat_start = True
    registry = ChatSessionRegistry()

    session_id, greeting, available = registry.open(assistant)
    assert not available
    assert greeting == CHAT_UNAVAILABLE
    with pytest.raises(NotFoundError):
        registry.get(session_id)


def test_closed_session_is_gone(assistant) -> None:
    registry = ChatSessionRegistry()
    session_id, _, _ = registry.open(assistant)
    registry.close(session_id)

    assert len(registry) == 0
    with pytest.raises(NotFoundError):
        registry.close(session_id)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_registry_evicts_least_recently_used_when_full(assistant) -> None:
    registry = ChatSessionRegistry(max_sessions=3)
    session_ids = [registry.open(assistant)[0] for _ in range(10)]

    assert len(registry) == 3
    with pytest.raises(NotFoundError):
        registry.get(session_ids[0])
    assert registry.get(session_ids[-1]) is assistant.chats[-1]


def test_recently_used_session_survives_eviction(assistant) -> None:
    registry = ChatSessionRegistry(max_sessions=2)
    first, _, _ = registry.open(assistant)
    second, _, _ = registry.open(assistant)

    registry.get(first)
    registry.open(assistant)

    assert registry.get(first) is assistant.chats[0]
    with pytest.raises(NotFoundError):
        registry.get(second)


def test_idle_sessions_expire(assistant) -> None:
    clock = FakeClock()
    registry = ChatSessionRegistry(idle_ttl=60, clock=clock)
    stale, _, _ = registry.open(assistant)
    clock.now = 30
    fresh, _, _ = registry.open(assistant)

    clock.now = 61
    with pytest.raises(NotFoundError):
        registry.get(stale)
    assert registry.get(fresh) is assistant.chats[1]
    assert len(registry) == 1
