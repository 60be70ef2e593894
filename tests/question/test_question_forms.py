import asyncio

from guildkeeper.question.forms import (
    BasicQuestionData,
    DetailedQuestionData,
    compose_post,
    extract_modal_values,
    parse_form,
)


def _modal_payload(values):
    return {
        "custom_id": "open_basic_question_modal:1",
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": key, "value": value}]}
            for key, value in values.items()
        ],
    }


BASIC = {
    "title": "Game crashes on startup",
    "mc_version": "1.20.1",
    "loader": "Forge",
    "loader_version": "47.2.0",
}


def test_extract_modal_values_walks_nested_components():
    payload = {
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": "a", "value": "1"}]},
            {"type": 18, "component": {"type": 4, "custom_id": "b", "value": "2"}},
        ]
    }

    assert extract_modal_values(payload) == {"a": "1", "b": "2"}
    assert extract_modal_values(None) == {}


def test_parse_form_accepts_values_within_bounds():
    parsed = parse_form(BasicQuestionData, _modal_payload(BASIC))

    assert parsed == BasicQuestionData(**BASIC)
    assert "Forge" in parsed.render()


def test_parse_form_rejects_out_of_bounds_and_missing_fields():
    too_short = dict(BASIC, title="short")
    missing = {k: v for k, v in BASIC.items() if k != "loader"}

    assert parse_form(BasicQuestionData, _modal_payload(too_short)) is None
    assert parse_form(BasicQuestionData, _modal_payload(missing)) is None
    assert parse_form(DetailedQuestionData, _modal_payload({"content": "x" * 1001})) is None


def test_detailed_modal_is_prefilled_with_example_text():
    async def build():
        return DetailedQuestionData.to_modal("open_detailed_question_modal:1", DetailedQuestionData.example())

    modal = asyncio.run(build())
    example = DetailedQuestionData.example()

    assert [child.default for child in modal.children] == [example.content, example.content2, example.content3]
    assert all(child.min_length == 20 and child.max_length == 1000 for child in modal.children)


def test_compose_post_includes_both_records_and_asker():
    basic = BasicQuestionData(**BASIC)
    detailed = DetailedQuestionData(content="c" * 20, content2="d" * 20, content3="e" * 20)

    body = compose_post(basic, detailed, "<@1>")

    assert body.startswith("### 基本情報")
    assert "### 質問内容" in body
    assert body.endswith("質問者: <@1>")
