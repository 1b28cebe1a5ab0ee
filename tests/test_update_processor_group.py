import pytest
from conftest import BOT_ID, BOT_USERNAME, GROUP_CHAT_ID, make_update, sent_texts

from proxy_bot.schemas.telegram import TelegramFileLookup
from proxy_bot.services import bot_messages as texts
from proxy_bot.services.n8n_client import DispatchResult

TEMPLATE = f"""@{BOT_USERNAME}
کانال:
کانال من

عنوان:
آموزش پایتون

توضیح:
جلسه اول

تگ ها:
پایتون و آموزش"""

TEMPLATE_WITH_LINK = f"""@{BOT_USERNAME}
آپلود
https://t.me/source_channel/77
عنوان:
ویدیو منبع
توضیح:
توضیحات
تگ ها:
خبر"""

REPLIED_VIDEO = {
    "message_id": 5,
    "date": 1701999000,
    "chat": {"id": GROUP_CHAT_ID, "type": "supergroup"},
    "video": {"file_id": "replied-vid", "duration": 30},
}


def group_update(**kwargs):
    return make_update(chat_id=GROUP_CHAT_ID, chat_type="supergroup", **kwargs)


class TestMentionGate:
    @pytest.mark.asyncio
    async def test_unmentioned_message_is_ignored(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text="عنوان:\nT\nتوضیح:\nD\nتگ ها:\na", video_id="v"))

        telegram.send_message.assert_not_awaited()
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_identity_failure_degrades_to_not_mentioned(self, processor, telegram, n8n):
        telegram.get_me.return_value = None

        await processor.handle_update(group_update(text=TEMPLATE, video_id="v"))

        telegram.send_message.assert_not_awaited()
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_identity_is_resolved_once(self, processor, telegram):
        await processor.handle_update(group_update(text=f"@{BOT_USERNAME}"))
        await processor.handle_update(group_update(text=f"@{BOT_USERNAME}"))

        assert telegram.get_me.await_count == 1

    @pytest.mark.asyncio
    async def test_group_flow_does_not_touch_wizard_state(self, processor, store, n8n):
        await processor.handle_update(group_update(text=TEMPLATE, video_id="current-vid"))

        n8n.send_video.assert_awaited_once()
        assert await store.get(GROUP_CHAT_ID) is None


class TestTemplateValidation:
    @pytest.mark.asyncio
    async def test_bare_video_without_text_is_ignored(self, processor, telegram):
        await processor.handle_update(group_update(video_id="v"))

        telegram.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mention_only_gets_unreadable_and_guidance(self, processor, telegram, n8n):
        # text_mention entity on a whitespace-only text
        await processor.handle_update(
            group_update(
                text="   ",
                entities=[{"type": "text_mention", "offset": 0, "length": 3, "user": {"id": BOT_ID, "is_bot": True}}],
            )
        )

        reply = sent_texts(telegram)[0]
        assert reply.startswith(texts.UNREADABLE_MESSAGE)
        assert f"@{BOT_USERNAME}" in reply
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unparseable_template_gets_guidance(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=f"@{BOT_USERNAME} سلام"))

        assert sent_texts(telegram) == [texts.guidance_template(BOT_USERNAME)]
        assert telegram.send_message.await_args.kwargs["reply_to_message_id"] == 10
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_template_without_tags_is_rejected(self, processor, telegram, n8n):
        text = f"@{BOT_USERNAME}\nعنوان:\nT\nتوضیح:\nD"
        await processor.handle_update(group_update(text=text, video_id="v"))

        assert sent_texts(telegram) == [texts.guidance_template(BOT_USERNAME)]
        n8n.send_video.assert_not_awaited()


class TestVideoResolution:
    @pytest.mark.asyncio
    async def test_source_link_uses_replied_video_over_current(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=TEMPLATE_WITH_LINK, video_id="current-vid", reply_to=REPLIED_VIDEO))

        telegram.get_file.assert_awaited_once_with("replied-vid")
        payload = n8n.send_video.await_args.args[0]
        assert payload.video.file_id == "replied-vid"
        assert payload.source_link == "https://t.me/source_channel/77"

    @pytest.mark.asyncio
    async def test_source_link_without_reply_asks_for_reply(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=TEMPLATE_WITH_LINK, video_id="current-vid"))

        assert sent_texts(telegram) == [texts.REPLY_REQUIRED_FOR_SOURCE_LINK]
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_source_link_with_trailing_note_still_requires_reply(self, processor, telegram, n8n):
        text = TEMPLATE_WITH_LINK.replace("https://t.me/source_channel/77", "https://t.me/source_channel/77 (اختیاری)")

        await processor.handle_update(group_update(text=text, video_id="current-vid"))

        assert sent_texts(telegram) == [texts.REPLY_REQUIRED_FOR_SOURCE_LINK]
        telegram.get_file.assert_not_awaited()
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_video_at_all(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=TEMPLATE))

        assert sent_texts(telegram) == [texts.VIDEO_REQUIRED]
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_caption_on_video_document(self, processor, telegram, n8n):
        await processor.handle_update(
            group_update(caption=TEMPLATE, document={"file_id": "doc-vid", "mime_type": "video/quicktime"})
        )

        assert n8n.send_video.await_args.args[0].video.file_id == "doc-vid"

    @pytest.mark.asyncio
    async def test_get_file_failure_is_reported(self, processor, telegram, n8n):
        telegram.get_file.return_value = TelegramFileLookup(ok=False, description="Bad Request: file is too big", status=400)

        await processor.handle_update(group_update(text=TEMPLATE, video_id="big"))

        reply = sent_texts(telegram)[-1]
        assert "Bad Request: file is too big" in reply
        n8n.send_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_file_id_is_an_internal_error(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=TEMPLATE, video_id="  "))

        assert sent_texts(telegram)[-1] == texts.EMPTY_FILE_ID
        n8n.send_video.assert_not_awaited()


class TestDispatch:
    @pytest.mark.asyncio
    async def test_successful_submission(self, processor, telegram, n8n):
        await processor.handle_update(group_update(text=TEMPLATE, video_id="vid-1", message_id=31))

        wire = n8n.send_video.await_args.args[0].to_wire()
        assert wire["chat_id"] == GROUP_CHAT_ID
        assert wire["message_id"] == 31
        assert wire["from"]["id"] == 42
        assert wire["video"] == {"file_id": "vid-1", "file_path": "videos/file_1.mp4", "file_size": 1048576}
        assert wire["title"] == "آموزش پایتون"
        assert wire["description"] == "جلسه اول"
        assert wire["tags"] == ["پایتون", "آموزش"]
        assert wire["channel"] == "کانال من"
        assert "source_link" not in wire
        telegram.send_chat_action.assert_awaited_with(GROUP_CHAT_ID, "typing")
        assert sent_texts(telegram) == [texts.GROUP_SUBMITTED]
        assert telegram.send_message.await_args.kwargs["reply_to_message_id"] == 31

    @pytest.mark.asyncio
    async def test_failed_submission_relays_status_and_body(self, processor, telegram, n8n):
        n8n.send_video.return_value = DispatchResult(ok=False, status_code=500, body_text="workflow crashed")

        await processor.handle_update(group_update(text=TEMPLATE, video_id="vid-1"))

        reply = sent_texts(telegram)[-1]
        assert "HTTP 500" in reply
        assert "workflow crashed" in reply
        n8n.send_video.assert_awaited_once()
