import httpx
import pytest

from zhaiyao.dependencies import get_summary_handler
from zhaiyao.domain.local_summary import build_local_summary, detect_language
from zhaiyao.exceptions import ChatServiceError
from zhaiyao.handlers import SummaryHandler
from zhaiyao.infrastructure import ChatCompletionsClient

from stubs import StubChat, chat_reply, make_config, unreachable_chat

EN_HEADINGS = [
    "## Part 1: Core Theme",
    "## Part 2: Key Insights",
    "## Part 3: Thematic Deep Dive",
    "## Part 4: Knowledge Cards",
    "## Part 5: Meta Analysis",
]
ZH_HEADINGS = [
    "## 第一部分：核心主题",
    "## 第二部分：核心观点提炼",
    "## 第三部分：主题式详细拆解",
    "## 第四部分：可视化知识卡片（参考）",
    "## 第五部分：元分析",
]

TRANSCRIPT = " ".join(f"Sentence number {index} about the roadmap." for index in range(50))


@pytest.fixture
def install(app):
    def build(chat: StubChat, api_key: str = "test-key") -> StubChat:
        provider = make_config(api_key=api_key).chat.providers["apimart"]
        handler = SummaryHandler(chat, provider, "bundled prompt")
        app.dependency_overrides[get_summary_handler] = lambda: handler
        return chat

    return build


def test_summary_comes_from_provider(client, install):
    chat = install(StubChat(payload=chat_reply("## Part 1: Core Theme\nRoadmap")))

    resp = client.post("/summarize", json={"transcript": "  hello team.  "})

    assert resp.status_code == 200
    assert resp.json() == {"summary": "## Part 1: Core Theme\nRoadmap"}
    call = chat.calls[0]
    assert call["temperature"] == 0.4
    assert call["messages"][0].content == "bundled prompt"
    assert call["messages"][1].content == "hello team."


def test_custom_prompt_replaces_bundled_one(client, install):
    chat = install(StubChat(payload=chat_reply("ok")))

    client.post("/summarize", json={"transcript": "hi.", "prompt": " Be brief. "})

    assert chat.calls[0]["messages"][0].content == "Be brief."


def test_unreachable_provider_falls_back_to_local_summary(client, install):
    install(unreachable_chat())

    resp = client.post("/summarize", json={"transcript": TRANSCRIPT})

    assert resp.status_code == 200
    data = resp.json()
    assert data["source"] == "local-fallback"
    assert data["warning"].startswith("⚠️ Unable to reach APIMart")
    positions = [data["summary"].index(heading) for heading in EN_HEADINGS]
    assert positions == sorted(positions)
    assert data["summary"] == build_local_summary(TRANSCRIPT)


def test_unreadable_provider_body_falls_back(client, install):
    install(StubChat(payload=None))

    resp = client.post("/summarize", json={"transcript": "第一句。第二句！"})

    assert resp.json()["source"] == "local-fallback"
    assert resp.json()["warning"].startswith("⚠️ 暂时无法连接 APIMart")


def test_provider_error_status_is_forwarded(client, install):
    install(StubChat(error=ChatServiceError("Rate limited", status_code=429)))

    resp = client.post("/summarize", json={"transcript": "hello."})

    assert resp.status_code == 429
    assert resp.json() == {"error": "Rate limited"}


def test_empty_model_content_is_bad_gateway(client, install):
    install(StubChat(payload=chat_reply("")))

    resp = client.post("/summarize", json={"transcript": "hello."})

    assert resp.status_code == 502


@pytest.mark.parametrize(
    "body",
    [{"transcript": "   "}, {"prompt": "x"}, {"transcript": 12}],
)
def test_invalid_transcripts_are_rejected(client, install, body):
    install(StubChat(payload=chat_reply("unused")))

    resp = client.post("/summarize", json=body)

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_malformed_json_is_rejected(client, install):
    install(StubChat(payload=chat_reply("unused")))

    resp = client.post(
        "/summarize", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 400


def test_missing_api_key_is_a_configuration_error(client, install):
    chat = install(StubChat(payload=chat_reply("unused")), api_key="")

    resp = client.post("/summarize", json={"transcript": "hello."})

    assert resp.status_code == 500
    assert chat.calls == []


def test_local_summary_is_deterministic_and_localized():
    zh = "我们讨论了季度目标。下一步是招聘！预算还需确认？"

    assert detect_language(zh) == "zh"
    assert detect_language(TRANSCRIPT) == "en"
    assert build_local_summary(zh) == build_local_summary(zh)
    summary = build_local_summary(zh)
    for heading in ZH_HEADINGS:
        assert heading in summary
    assert "【关键洞察 3】" in summary
    assert "| 步骤 1 |" in summary


def test_local_summary_truncates_long_sentences():
    long_sentence = "word " * 100 + "."

    summary = build_local_summary(long_sentence)

    assert "…" in summary


def test_gateway_error_page_falls_back_to_local_summary(client, app):
    gateway = httpx.Client(
        transport=httpx.MockTransport(
            lambda r: httpx.Response(502, text="<html>Bad Gateway</html>")
        )
    )
    provider = make_config(api_key="test-key").chat.providers["apimart"]
    handler = SummaryHandler(ChatCompletionsClient(gateway), provider, "bundled prompt")
    app.dependency_overrides[get_summary_handler] = lambda: handler

    resp = client.post("/summarize", json={"transcript": TRANSCRIPT})

    assert resp.status_code == 200
    assert resp.json()["source"] == "local-fallback"
    assert resp.json()["summary"] == build_local_summary(TRANSCRIPT)


def test_json_provider_error_is_not_masked_by_fallback(client, install):
    install(
        StubChat(
            error=ChatServiceError("Bad Gateway", status_code=502, body_readable=True)
        )
    )

    resp = client.post("/summarize", json={"transcript": "hello."})

    assert resp.status_code == 502
    assert resp.json() == {"error": "Bad Gateway"}
