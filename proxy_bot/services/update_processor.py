from typing import Awaitable, Callable

from proxy_bot.logging_config import LoggerAdapter, chat_logger, get_logger
from proxy_bot.schemas.chat_state import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, ChatState
from proxy_bot.schemas.submission import SubmissionPayload, SubmitterInfo, VideoRef, validate_video_metadata
from proxy_bot.schemas.telegram import TelegramMessage, TelegramUpdate
from proxy_bot.services import bot_messages as texts
from proxy_bot.services.bot_identity import BotIdentityCache
from proxy_bot.services.mention_service import is_bot_mentioned, is_group_chat, select_video_file_id
from proxy_bot.services.n8n_client import DispatchResult, N8nClient
from proxy_bot.services.state_machine import WizardStep, advance
from proxy_bot.services.state_store import ChatStateStore
from proxy_bot.services.telegram_service import TelegramService
from proxy_bot.services.template_parser import parse_group_template, split_tags

logger = get_logger("update_processor")

StepHandler = Callable[[TelegramMessage, ChatState, str], Awaitable[None]]


def is_start_command(text: str) -> bool:
    return text == "/start"


def is_cancel_command(text: str) -> bool:
    return text == "/cancel" or text.lower() == "cancel" or text == texts.CANCEL_KEYWORD


def is_confirm_command(text: str) -> bool:
    return text == "/confirm" or text.lower() == "confirm" or text == texts.CONFIRM_KEYWORD


class TelegramUpdateProcessor:
    """Routes one Telegram update to the group template flow or the private wizard."""

    def __init__(
        self,
        store: ChatStateStore,
        telegram: TelegramService,
        n8n: N8nClient,
        identity: BotIdentityCache,
    ):
        self.store = store
        self.telegram = telegram
        self.n8n = n8n
        self.identity = identity
        self._step_handlers: dict[WizardStep, StepHandler] = {
            WizardStep.AWAITING_VIDEO: self._on_awaiting_video,
            WizardStep.AWAITING_TITLE: self._on_awaiting_title,
            WizardStep.AWAITING_DESCRIPTION: self._on_awaiting_description,
            WizardStep.AWAITING_TAGS: self._on_awaiting_tags,
            WizardStep.AWAITING_CONFIRM: self._on_awaiting_confirm,
        }

    async def handle_update(self, update: TelegramUpdate) -> None:
        message = update.message
        if message is None:
            return

        if is_group_chat(message):
            await self._handle_group_message(message)
        else:
            await self._handle_private_message(message)

    # ── Group: mention + single-message template ─────────────────────────────

    async def _handle_group_message(self, message: TelegramMessage) -> None:
        chat_id = message.chat.id
        log = chat_logger(logger, chat_id, message.message_id)

        identity = await self.identity.get()
        if not is_bot_mentioned(message, identity):
            return

        bot_username = identity.username if identity else None
        reply_to = message.message_id
        content = (message.text or "").strip() or (message.caption or "").strip()

        if not content:
            await self.telegram.send_message(
                chat_id,
                texts.UNREADABLE_MESSAGE + "\n\n" + texts.guidance_template(bot_username),
                reply_to_message_id=reply_to,
            )
            return

        parsed = parse_group_template(content, bot_username)
        if parsed is None or validate_video_metadata(parsed.title, parsed.description, parsed.tags):
            log.info("Group template rejected", context={"parsed": parsed is not None})
            await self.telegram.send_message(chat_id, texts.guidance_template(bot_username), reply_to_message_id=reply_to)
            return

        await self.telegram.send_chat_action(chat_id, "typing")

        file_id = select_video_file_id(message, has_source_link=bool(parsed.source_link))
        log.info(
            "Group template parsed",
            context={
                "has_source_link": bool(parsed.source_link),
                "has_reply_video": message.reply_to_message is not None,
                "video_selected": bool(file_id),
            },
        )
        if file_id is None:
            await self.telegram.send_message(
                chat_id,
                texts.REPLY_REQUIRED_FOR_SOURCE_LINK if parsed.source_link else texts.VIDEO_REQUIRED,
                reply_to_message_id=reply_to,
            )
            return

        lookup = await self.telegram.get_file(file_id)
        if not lookup.ok:
            log.warning("getFile rejected video", context={"description": lookup.description, "status": lookup.status})
            await self.telegram.send_message(
                chat_id, texts.file_lookup_failed(lookup.description), reply_to_message_id=reply_to
            )
            return

        if not file_id.strip():
            log.error("Empty video file_id before dispatch")
            await self.telegram.send_message(chat_id, texts.EMPTY_FILE_ID, reply_to_message_id=reply_to)
            return

        payload = SubmissionPayload(
            chat_id=chat_id,
            from_user=SubmitterInfo.from_user(message.from_user),
            message_id=message.message_id,
            date=message.date,
            video=VideoRef(
                file_id=file_id,
                file_path=lookup.result.file_path if lookup.result else None,
                file_size=lookup.result.file_size if lookup.result else None,
            ),
            title=parsed.title,
            description=parsed.description,
            tags=parsed.tags,
            source_link=parsed.source_link,
            channel=parsed.channel,
        )
        result = await self._dispatch(payload, log)
        if result.ok:
            await self.telegram.send_message(chat_id, texts.GROUP_SUBMITTED, reply_to_message_id=reply_to)
        else:
            await self.telegram.send_message(
                chat_id, texts.dispatch_failed(result.status_code, result.body_text), reply_to_message_id=reply_to
            )

    # ── Private: step-by-step wizard ─────────────────────────────────────────

    async def _handle_private_message(self, message: TelegramMessage) -> None:
        chat_id = message.chat.id
        text = (message.text or "").strip()

        if is_start_command(text):
            await self.store.delete(chat_id)
            await self.store.save(ChatState.start(chat_id))
            await self.telegram.send_message(chat_id, texts.WELCOME)
            return

        if is_cancel_command(text):
            await self.store.delete(chat_id)
            await self.telegram.send_message(chat_id, texts.CANCELLED)
            return

        state = await self.store.get(chat_id)

        if state is None:
            if message.video:
                state = ChatState.start(chat_id, WizardStep.AWAITING_TITLE, video_file_id=message.video.file_id)
                await self.store.save(state)
                await self.telegram.send_message(chat_id, texts.ASK_TITLE)
            else:
                await self.telegram.send_message(chat_id, texts.START_FIRST)
            return

        handler = self._step_handlers.get(state.wizard_step)
        if handler is None:
            chat_logger(logger, chat_id).warning("Unknown wizard step, purging state", context={"step": state.step})
            await self.store.delete(chat_id)
            await self.telegram.send_message(chat_id, texts.UNKNOWN_STATE)
            return

        await handler(message, state, text)

    async def _advance(self, state: ChatState) -> None:
        state.step = advance(state.wizard_step).value
        state.touch()
        await self.store.save(state)

    async def _on_awaiting_video(self, message: TelegramMessage, state: ChatState, text: str) -> None:
        if not (message.video and message.video.file_id):
            await self.telegram.send_message(state.chat_id, texts.VIDEO_ONLY)
            return
        state.video_file_id = message.video.file_id
        await self._advance(state)
        await self.telegram.send_message(state.chat_id, texts.ASK_TITLE)

    async def _on_awaiting_title(self, message: TelegramMessage, state: ChatState, text: str) -> None:
        if not text:
            await self.telegram.send_message(state.chat_id, texts.INVALID_TITLE)
            return
        state.title = text[:TITLE_MAX_LENGTH]
        await self._advance(state)
        await self.telegram.send_message(state.chat_id, texts.ASK_DESCRIPTION)

    async def _on_awaiting_description(self, message: TelegramMessage, state: ChatState, text: str) -> None:
        if not text:
            await self.telegram.send_message(state.chat_id, texts.INVALID_DESCRIPTION)
            return
        state.description = text[:DESCRIPTION_MAX_LENGTH]
        await self._advance(state)
        await self.telegram.send_message(state.chat_id, texts.ASK_TAGS)

    async def _on_awaiting_tags(self, message: TelegramMessage, state: ChatState, text: str) -> None:
        if not text:
            await self.telegram.send_message(state.chat_id, texts.INVALID_TAGS)
            return
        tags = split_tags(text)
        if not tags:
            await self.telegram.send_message(state.chat_id, texts.NO_TAGS)
            return
        state.tags = tags
        await self._advance(state)
        await self.telegram.send_message(state.chat_id, texts.confirm_summary(state))

    async def _on_awaiting_confirm(self, message: TelegramMessage, state: ChatState, text: str) -> None:
        chat_id = state.chat_id
        if not is_confirm_command(text):
            await self.telegram.send_message(chat_id, texts.CONFIRM_REMINDER)
            return

        log = chat_logger(logger, chat_id, message.message_id)
        if not state.video_file_id or validate_video_metadata(state.title, state.description, state.tags):
            log.warning("Incomplete state at confirm, purging")
            await self.telegram.send_message(chat_id, texts.INCOMPLETE_STATE)
            await self.store.delete(chat_id)
            return

        await self.telegram.send_chat_action(chat_id, "typing")
        # The stored file_id is sent as-is; it was accepted when the video arrived.
        payload = SubmissionPayload(
            chat_id=chat_id,
            from_user=SubmitterInfo.from_user(message.from_user),
            message_id=message.message_id,
            date=message.date,
            video=VideoRef(file_id=state.video_file_id),
            title=state.title,
            description=state.description,
            tags=state.tags,
        )
        result = await self._dispatch(payload, log)
        if result.ok:
            await self.telegram.send_message(chat_id, texts.WIZARD_SUBMITTED)
            await self.store.delete(chat_id)
        else:
            # State is kept so the user can send confirm again.
            await self.telegram.send_message(chat_id, texts.dispatch_failed(result.status_code, result.body_text))

    async def _dispatch(self, payload: SubmissionPayload, log: LoggerAdapter) -> DispatchResult:
        log.info(
            "Sending to n8n",
            context={
                "video_file_id": payload.video.file_id,
                "title": payload.title,
                "has_source_link": bool(payload.source_link),
                "has_channel": bool(payload.channel),
            },
        )
        result = await self.n8n.send_video(payload)
        if result.ok:
            log.info("n8n accepted submission", context={"status": result.status_code})
        else:
            log.error(
                "n8n rejected submission",
                context={"status": result.status_code, "body": (result.body_text or "")[:texts.ERROR_BODY_PREVIEW_LENGTH]},
            )
        return result
