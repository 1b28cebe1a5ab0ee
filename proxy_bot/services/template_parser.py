"""
Parser for the group-chat submission template.

Users mention the bot and send a free-text block made of header lines
(آپلود, کانال, عنوان, توضیح, تگ ها) each followed by its content. Headers may
come in any order; a header line switches the active section and every
following non-empty line goes into that section until the next header.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from proxy_bot.schemas.chat_state import DESCRIPTION_MAX_LENGTH, MAX_TAGS, TITLE_MAX_LENGTH


class Section(str, Enum):
    UPLOAD = "upload"
    CHANNEL = "channel"
    TITLE = "title"
    DESCRIPTION = "description"
    TAGS = "tags"


# Matched against the whole line after header punctuation is removed.
HEADER_PATTERNS: list[tuple[re.Pattern, Section]] = [
    (re.compile(r"^آپلود$", re.IGNORECASE), Section.UPLOAD),
    (re.compile(r"^کانال$", re.IGNORECASE), Section.CHANNEL),
    (re.compile(r"^عنوان$", re.IGNORECASE), Section.TITLE),
    (re.compile(r"^توضیح$", re.IGNORECASE), Section.DESCRIPTION),
    (re.compile(r"^تگ(?:\s*|\u200c)ها$", re.IGNORECASE), Section.TAGS),
    (re.compile(r"^تگ$", re.IGNORECASE), Section.TAGS),
]

HEADER_PUNCTUATION = re.compile(r"[:：]")
URL_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*$", re.IGNORECASE)
LINE_SPLIT = re.compile(r"\r?\n")
TAG_SEPARATORS = re.compile(r"[,،\n]+|\s+(?:(?:و|and)\s+)+", re.IGNORECASE)


@dataclass
class ParsedTemplate:
    source_link: Optional[str] = None
    channel: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None


def match_header(line: str) -> Optional[Section]:
    candidate = HEADER_PUNCTUATION.sub("", line).strip()
    for pattern, section in HEADER_PATTERNS:
        if pattern.match(candidate):
            return section
    return None


def is_absolute_url(value: str) -> bool:
    """Scheme and host must be well formed; anything after the host may contain spaces."""
    if not value:
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    if not URL_SCHEME.match(parsed.scheme) or not parsed.netloc:
        return False
    return not any(ch.isspace() for ch in parsed.netloc)


def split_tags(raw: str, limit: int = MAX_TAGS) -> list[str]:
    """Split a tag string on commas (ASCII or Persian), newlines and the word و/and."""
    if not raw:
        return []
    tags = []
    for piece in TAG_SEPARATORS.split(raw):
        tag = piece.strip()
        if tag.startswith("#"):
            tag = tag[1:].strip()
        if tag:
            tags.append(tag)
    return tags[:limit]


def strip_mention(text: str, bot_username: Optional[str]) -> str:
    if not bot_username:
        return text
    return re.sub(re.escape(f"@{bot_username}"), "", text, flags=re.IGNORECASE)


def parse_group_template(text: str, bot_username: Optional[str] = None) -> Optional[ParsedTemplate]:
    """Extract template fields. Returns None when no title, description or tag was found."""
    lines = [line.strip() for line in LINE_SPLIT.split(strip_mention(text or "", bot_username))]
    lines = [line for line in lines if line]

    section: Optional[Section] = None
    source_link: Optional[str] = None
    title: Optional[str] = None
    channel_lines: list[str] = []
    description_lines: list[str] = []
    tag_lines: list[str] = []

    for line in lines:
        header = match_header(line)
        if header is not None:
            section = header
            continue

        if section is Section.UPLOAD:
            if source_link is None and is_absolute_url(line):
                source_link = line
        elif section is Section.CHANNEL:
            channel_lines.append(line)
        elif section is Section.TITLE:
            if title is None:
                title = line
        elif section is Section.DESCRIPTION:
            description_lines.append(line)
        elif section is Section.TAGS:
            tag_lines.append(line)
        # lines before the first header are dropped

    tags = split_tags(" ".join(tag_lines))
    result = ParsedTemplate(
        source_link=source_link,
        channel=" ".join(channel_lines) or None,
        title=title[:TITLE_MAX_LENGTH] if title else None,
        description="\n".join(description_lines)[:DESCRIPTION_MAX_LENGTH] or None,
        tags=tags or None,
    )
    if not result.title and not result.description and not result.tags:
        return None
    return result
