"""Deterministic summary used when the AI provider cannot be reached."""

import re
from typing import Literal

Language = Literal["zh", "en"]

_CJK = re.compile(r"[\u4e00-\u9fa5]")
_SENTENCE_END = {
    "zh": re.compile(r"(?<=[。！？])"),
    "en": re.compile(r"(?<=[.!?])"),
}

FALLBACK_COPY: dict[Language, dict] = {
    "zh": {
        "warning": "⚠️ 暂时无法连接 APIMart，以下为本地快速提炼，仅供预览，请稍后重试以生成正式版摘要。",
        "intro_heading": "## 第一部分：核心主题",
        "intro_guide": "该版本依据本地规则粗略提炼，涵盖录音中的主线与目标，最终结果可能与正式模型存在差异。",
        "keypoint_heading": "## 第二部分：核心观点提炼",
        "keypoint_title": "【关键洞察 {n}】",
        "keypoint_core": "核心思想：",
        "keypoint_quote": "金句：",
        "keypoint_why": "为什么重要：",
        "keypoint_why_tail": "该信息在原文中出现频繁，是推动讨论的关键依据。",
        "theme_heading": "## 第三部分：主题式详细拆解",
        "theme_title": "### 主题 {n}",
        "theme_core": "核心论点：",
        "theme_story": "案例/情节：",
        "theme_action": "可操作建议：",
        "theme_quote": "相关金句：",
        "card_heading": "## 第四部分：可视化知识卡片（参考）",
        "card_columns": ["步骤", "行动", "提示"],
        "card_step": "步骤 {n}",
        "meta_heading": "## 第五部分：元分析",
        "meta_bullets": [
            "识别：抓取高频词与连续语义组成核心主题。",
            "删减：去除问候、停顿、重复措辞和明显离题内容。",
            "保留：保留带情绪色彩或数据信息的句子以支撑观点。",
            "质量：由于为离线推断，建议使用 AI 模型重新生成以获得更丰富的推理。",
        ],
        "joiner": "",
    },
    "en": {
        "warning": "⚠️ Unable to reach APIMart. Generated a lightweight local summary for preview. Please retry later for the full AI output.",
        "intro_heading": "## Part 1: Core Theme",
        "intro_guide": "This snapshot is produced locally and only captures the major storyline and goal. The official AI model will provide richer reasoning once the network is available.",
        "keypoint_heading": "## Part 2: Key Insights",
        "keypoint_title": "【Insight {n}】",
        "keypoint_core": "Core idea: ",
        "keypoint_quote": "Quote: ",
        "keypoint_why": "Why it matters: ",
        "keypoint_why_tail": "This sentence surfaced multiple times and drives the conversation forward.",
        "theme_heading": "## Part 3: Thematic Deep Dive",
        "theme_title": "### Theme {n}",
        "theme_core": "Main argument: ",
        "theme_story": "Supporting story: ",
        "theme_action": "Actionable advice: ",
        "theme_quote": "Signature quote: ",
        "card_heading": "## Part 4: Knowledge Cards",
        "card_columns": ["Step", "Action", "Key note"],
        "card_step": "Step {n}",
        "meta_heading": "## Part 5: Meta Analysis",
        "meta_bullets": [
            "Signals: detected high-frequency words and glued them as the storyline.",
            "Trimmed: removed greetings, fillers, and obvious tangents.",
            "Kept: preserved sentences with data or emotions to keep the tone.",
            "Quality: this is a lightweight reconstruction; rerun with the AI model for production-ready insight.",
        ],
        "joiner": " ",
    },
}

KEY_POINT_LIMIT = 6
THEME_LIMIT = 3
CARD_LIMIT = 3


def detect_language(transcript: str) -> Language:
    return "zh" if _CJK.search(transcript) else "en"


def split_sentences(transcript: str, language: Language) -> list[str]:
    sentences = []
    for line in re.split(r"\n+", transcript.replace("\r", "\n")):
        line = line.strip()
        if not line:
            continue
        parts = [part.strip() for part in _SENTENCE_END[language].split(line)]
        sentences.extend(part for part in parts if part)
    return sentences


def truncate(text: str, max_length: int = 120) -> str:
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}…"


def _chunks(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def fallback_warning(transcript: str) -> str:
    return FALLBACK_COPY[detect_language(transcript)]["warning"]


def build_local_summary(transcript: str) -> str:
    """
    Builds a five-part Markdown summary from the transcript's own sentences.

    The sections mirror the AI prompt (core theme, key insights, thematic
    deep dive, knowledge cards, meta analysis) so the UI renders both the
    same way. Output is a pure function of the input text.
    """
    language = detect_language(transcript)
    copy = FALLBACK_COPY[language]
    sentences = split_sentences(transcript, language) or [transcript[:200]]

    summary_text = copy["joiner"].join(sentences[:6])

    key_point_count = min(KEY_POINT_LIMIT, len(sentences))
    key_points = []
    for index, sentence in enumerate(sentences[:key_point_count]):
        clipped = truncate(sentence, 160)
        key_points.append(
            "\n".join(
                [
                    copy["keypoint_title"].format(n=index + 1),
                    f"{copy['keypoint_core']}{clipped}",
                    f"{copy['keypoint_quote']}“{clipped}”",
                    f"{copy['keypoint_why']}{copy['keypoint_why_tail']}",
                ]
            )
        )

    themes = []
    for index, chunk in enumerate(_chunks(sentences[key_point_count:], 3)[:THEME_LIMIT]):
        core, story, action = ([truncate(item, 200) for item in chunk] + ["-", "-", "-"])[:3]
        quote = f"“{truncate(chunk[0], 80)}”" if chunk else "-"
        themes.append(
            "\n".join(
                [
                    copy["theme_title"].format(n=index + 1),
                    f"{copy['theme_core']}{core}",
                    f"{copy['theme_story']}{story}",
                    f"{copy['theme_action']}{action}",
                    f"{copy['theme_quote']}{quote}",
                ]
            )
        )

    card_rows = []
    for index, chunk in enumerate(_chunks(sentences, 3)[:CARD_LIMIT]):
        action, detail, hint = (chunk + ["-", "-", "-"])[:3]
        card_rows.append(
            f"| {copy['card_step'].format(n=index + 1)} | {truncate(action, 120)} "
            f"| {truncate(detail or hint, 120)} |"
        )

    columns = copy["card_columns"]
    blocks = [
        copy["intro_heading"],
        copy["intro_guide"],
        summary_text,
        copy["keypoint_heading"],
        "\n\n".join(key_points),
        copy["theme_heading"],
        "\n\n".join(themes) or "-",
        copy["card_heading"],
        "\n".join(
            [
                f"| {' | '.join(columns)} |",
                f"| {' | '.join('---' for _ in columns)} |",
                *(card_rows or ["| - | - | - |"]),
            ]
        ),
        copy["meta_heading"],
        "\n".join(f"- {line}" for line in copy["meta_bullets"]),
    ]
    return "\n\n".join(block for block in blocks if block)
