import pytest

from zhaiyao.dependencies import get_chat_handler
from zhaiyao.exceptions import ChatServiceError
from zhaiyao.handlers import ChatHandler
from zhaiyao.handlers.chat_handler import ASSISTANT_PROMPT, FALLBACK_REPLY

from stubs import StubChat, chat_reply, make_config, unreachable_chat


@pytest.fixture
def install(app):
    def build(chat: StubChat, deepseek_key: str = "") -> StubChat:
        handler = ChatHandler(chat, make_config(deepseek_key=deepseek_key).chat)
        app.dependency_overrides[get_chat_handler] = lambda: handler
        return chat

    return build


def test_reply_with_transcript_context(client, install):
    chat = install(StubChat(payload=chat_reply("  Try a shorter file.  ")))
    transcript = "x" * 10_500 + "END"

    resp = client.post(
        "/chat",
        json={
            "contextTranscript": transcript,
            "messages": [
                {"role": "user", "content": "Why did upload fail?"},
                {"role": "tool", "content": "ignored"},
                {"role": "assistant", "content": 7},
            ],
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"reply": "Try a shorter file."}

    call = chat.calls[0]
    assert call["provider"] == "apimart"
    assert (call["temperature"], call["max_tokens"], call["top_p"]) == (0.4, 400, 0.9)
    messages = call["messages"]
    assert messages[0].content == ASSISTANT_PROMPT
    assert messages[1].role == "system"
    assert messages[1].content.endswith("END")
    assert len(messages[1].content.split("Transcript:\n", 1)[1]) == 10_000
    assert [m.content for m in messages[2:]] == ["Why did upload fail?"]


def test_empty_reply_uses_apology(client, install):
    install(StubChat(payload=chat_reply("")))

    resp = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.json() == {"reply": FALLBACK_REPLY}


def test_selected_provider_without_key_is_rejected(client, install):
    chat = install(StubChat(payload=chat_reply("unused")))

    resp = client.post(
        "/chat",
        json={"provider": "DeepSeek", "messages": [{"role": "user", "content": "hi"}]},
    )

    assert resp.status_code == 500
    assert resp.json() == {"error": "DeepSeek · Chat API key is not configured."}
    assert chat.calls == []


def test_unknown_provider_uses_default(client, install):
    chat = install(StubChat(payload=chat_reply("ok")), deepseek_key="ds-key")

    client.post(
        "/chat",
        json={"provider": "mystery", "messages": [{"role": "user", "content": "hi"}]},
    )

    assert chat.calls[0]["provider"] == "apimart"


def test_no_valid_messages_is_rejected(client, install):
    install(StubChat(payload=chat_reply("unused")))

    resp = client.post("/chat", json={"messages": [{"role": "robot", "content": "hi"}]})

    assert resp.status_code == 400
    assert resp.json() == {"error": "At least one message is required."}


def test_provider_errors_are_forwarded(client, install):
    install(StubChat(error=ChatServiceError("Invalid API key", status_code=401)))

    resp = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid API key"}


def test_unreachable_provider_is_service_unavailable(client, install):
    install(unreachable_chat())

    resp = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.status_code == 503
    assert resp.json()["error"].startswith("Unable to reach APIMart · Gemini")
