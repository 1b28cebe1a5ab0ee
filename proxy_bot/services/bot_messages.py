"""User-facing texts (Persian)."""

from typing import Optional

from proxy_bot.schemas.chat_state import ChatState

ERROR_BODY_PREVIEW_LENGTH = 400

CANCEL_KEYWORD = "لغو"
CONFIRM_KEYWORD = "تایید"

WELCOME = "\n".join(
    [
        "سلام! 👋",
        "این ربات اطلاعات ویدیو را جمع‌آوری می‌کند و برای n8n می‌فرستد تا در یوتیوب آپلود شود.",
        "لطفاً ویدیوی خود را ارسال کنید تا شروع کنیم.",
        "برای لغو در هر مرحله: /cancel",
    ]
)

CANCELLED = "روند فعلی لغو شد. برای شروع دوباره، /start را بزنید."
START_FIRST = "برای شروع فرآیند آپلود، ابتدا /start را ارسال کنید و سپس ویدیو را بفرستید."

ASK_TITLE = "عنوان ویدیو را ارسال کنید:"
ASK_DESCRIPTION = "توضیحات ویدیو را ارسال کنید:"
ASK_TAGS = "تگ‌ها را با ویرگول جدا کنید.\nمثال: آموزش, برنامه نویسی, جاوااسکریپت"

VIDEO_ONLY = "لطفاً ابتدا ویدیو را ارسال کنید (نه فایل اسناد).\nمی‌توانید ویدیو را مستقیماً در چت بفرستید."
INVALID_TITLE = "عنوان نامعتبر است. لطفاً یک متن ارسال کنید."
INVALID_DESCRIPTION = "توضیحات نامعتبر است. لطفاً یک متن ارسال کنید."
INVALID_TAGS = "ورودی نامعتبر. لطفاً تگ‌ها را با ویرگول جدا کنید."
NO_TAGS = "حداقل یک تگ وارد کنید (با ویرگول جدا کنید)."

INCOMPLETE_STATE = "اطلاعات ناقص است. لطفاً از ابتدا /start را ارسال کنید."
CONFIRM_REMINDER = "برای تایید، کلمه confirm یا /confirm را ارسال کنید. برای لغو، cancel یا /cancel."
UNKNOWN_STATE = "حالت ناشناخته. لطفاً /start را ارسال کنید."

WIZARD_SUBMITTED = "درخواست با موفقیت برای n8n ارسال شد. منتظر آپلود یوتیوب بمانید.\nبرای شروع دوباره، /start را بزنید."
GROUP_SUBMITTED = "درخواست شما ثبت شد و به n8n ارسال گردید. ✅"

UNREADABLE_MESSAGE = "پیام شما قابل‌خواندن نبود. لطفاً قالب را به صورت متن در یک پیام ارسال کنید."
REPLY_REQUIRED_FOR_SOURCE_LINK = (
    "برای این پیام که لینک منبع دارد، حتما باید روی پیام ویدیوی تلگرام REPLY بزنید تا همان ویدیو انتخاب شود."
)
VIDEO_REQUIRED = (
    "برای ارسال به n8n لازم است ویدیوی تلگرام را ضمیمه کنید یا پیام شما ریپلایِ مستقیم به پیامِ ویدیوی تلگرام باشد."
)
EMPTY_FILE_ID = "خطای داخلی: file_id ویدیو خالی است. لطفاً دوباره تلاش کنید."
DEFAULT_FILE_ERROR = "file_id نامعتبر یا فایل موقتاً در دسترس نیست"

GUIDANCE_TEMPLATE = "\n".join(
    [
        "لطفاً پیام خود را با منشن کردن ربات و در قالب زیر ارسال کنید:",
        "",
        "@BOT_USERNAME",
        "آپلود",
        "https://t.me/YOUR_CHANNEL/MESSAGE_ID (اختیاری)",
        "",
        "کانال:",
        "نام کانال شما",
        "",
        "عنوان:",
        "عنوان ویدیو",
        "",
        "توضیح:",
        "توضیحات ویدیو",
        "",
        "تگ ها:",
        "تگ۱ و تگ۲ و تگ۳",
        "",
        "نکات:",
        "- لینک در بخش آپلود اختیاری است.",
        "- تگ‌ها را می‌توانید با ویرگول، 'و' یا سطر جدید جدا کنید.",
        "- برای اطمینان از انتخاب ویدیوی درست، روی پیامِ ویدیوی تلگرام REPLY بزنید و این قالب را به همراه منشن ارسال کنید.",
    ]
)


def guidance_template(bot_username: Optional[str] = None) -> str:
    """Template example, with the real bot handle when it is known."""
    if bot_username:
        return GUIDANCE_TEMPLATE.replace("@BOT_USERNAME", f"@{bot_username}")
    return GUIDANCE_TEMPLATE


def confirm_summary(state: ChatState) -> str:
    tags = " ".join(f"#{tag}" for tag in state.tags or [])
    return "\n".join(
        [
            "لطفاً اطلاعات زیر را بررسی کنید:",
            f"عنوان: {state.title or '-'}",
            f"توضیحات: {state.description or '-'}",
            f"تگ‌ها: {tags or '-'}",
            "اگر مورد تایید است، confirm یا /confirm را ارسال کنید. برای لغو: cancel یا /cancel",
        ]
    )


def file_lookup_failed(description: Optional[str]) -> str:
    return (
        f"خطا در دریافت فایل از تلگرام: {description or DEFAULT_FILE_ERROR}.\n"
        "لطفاً ویدیو را مستقیماً در همین گروه ارسال کنید و سپس روی همان پیام REPLY کرده و قالب را بفرستید."
    )


def dispatch_failed(status_code: int, body_text: Optional[str]) -> str:
    preview = (body_text or "")[:ERROR_BODY_PREVIEW_LENGTH]
    return f"ارسال به n8n با خطا مواجه شد (HTTP {status_code}).\n{preview}"
