"""Pydantic models for the Telegram Bot API objects the dispatcher consumes.

Only the part of the schema that update classification and the typed
registrations touch is modelled here.  Every model is frozen, and unknown
fields are ignored, so payloads from newer API versions still decode.
The ``from`` key is exposed as ``from_user``.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramObject(BaseModel):
    """Base class: immutable once decoded, tolerant of unknown keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


# ── People and chats ─────────────────────────────────────────────────────────


class User(TelegramObject):
    """A Telegram user or bot."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class Chat(TelegramObject):
    """A private chat, group, supergroup or channel."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class MessageEntity(TelegramObject):
    """A special entity in a text message (command, mention, URL, …)."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional[User] = None
    language: Optional[str] = None


# ── Media ────────────────────────────────────────────────────────────────────


class PhotoSize(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: Optional[int] = None


class Audio(TelegramObject):
    file_id: str
    file_unique_id: str
    duration: int
    performer: Optional[str] = None
    title: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class Document(TelegramObject):
    file_id: str
    file_unique_id: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class Animation(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    duration: int
    file_name: Optional[str] = None
    mime_type: Optional[str] = None


class Video(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    duration: int
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class VideoNote(TelegramObject):
    """A rounded square video message."""

    file_id: str
    file_unique_id: str
    length: int
    duration: int


class Voice(TelegramObject):
    file_id: str
    file_unique_id: str
    duration: int
    mime_type: Optional[str] = None


class Sticker(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    is_animated: bool = False
    emoji: Optional[str] = None
    set_name: Optional[str] = None


# ── Structured content ───────────────────────────────────────────────────────


class Contact(TelegramObject):
    phone_number: str
    first_name: str
    last_name: Optional[str] = None
    user_id: Optional[int] = None
    vcard: Optional[str] = None


class Location(TelegramObject):
    longitude: float
    latitude: float
    horizontal_accuracy: Optional[float] = None


class Venue(TelegramObject):
    location: Location
    title: str
    address: str
    foursquare_id: Optional[str] = None


class Dice(TelegramObject):
    emoji: str
    value: int


class Game(TelegramObject):
    """A game; the short name acts as its unique identifier."""

    title: str
    description: str
    photo: List[PhotoSize]
    text: Optional[str] = None
    animation: Optional[Animation] = None


class PollOption(TelegramObject):
    text: str
    voter_count: int


class Poll(TelegramObject):
    """A poll, either inside a message or as a standalone state update."""

    id: str
    question: str
    options: List[PollOption]
    total_voter_count: int
    is_closed: bool
    is_anonymous: bool
    type: str
    allows_multiple_answers: bool
    correct_option_id: Optional[int] = None


class PollAnswer(TelegramObject):
    """A user's answer in a non-anonymous poll.

    Decoded so that ``poll_answer`` updates validate, but the dispatcher does
    not classify them.
    """

    poll_id: str
    user: User
    option_ids: List[int]


# ── Messages ─────────────────────────────────────────────────────────────────


class Message(TelegramObject):
    """A message in a chat or channel.

    At most one of the content fields (``text``, ``photo``, ``audio``, …) is
    normally present; the typed message registrations key on which one is.
    """

    message_id: int
    date: int
    chat: Chat
    from_user: Optional[User] = Field(None, alias="from")
    sender_chat: Optional[Chat] = None
    reply_to_message: Optional[Message] = None
    edit_date: Optional[int] = None
    media_group_id: Optional[str] = None
    author_signature: Optional[str] = None
    text: Optional[str] = None
    entities: Optional[List[MessageEntity]] = None
    caption: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None
    animation: Optional[Animation] = None
    audio: Optional[Audio] = None
    document: Optional[Document] = None
    photo: Optional[List[PhotoSize]] = None
    sticker: Optional[Sticker] = None
    video: Optional[Video] = None
    video_note: Optional[VideoNote] = None
    voice: Optional[Voice] = None
    contact: Optional[Contact] = None
    dice: Optional[Dice] = None
    game: Optional[Game] = None
    poll: Optional[Poll] = None
    venue: Optional[Venue] = None
    location: Optional[Location] = None


# ── Queries ──────────────────────────────────────────────────────────────────


class InlineQuery(TelegramObject):
    id: str
    from_user: User = Field(..., alias="from")
    query: str
    offset: str
    location: Optional[Location] = None


class ChosenInlineResult(TelegramObject):
    result_id: str
    from_user: User = Field(..., alias="from")
    query: str
    location: Optional[Location] = None
    inline_message_id: Optional[str] = None


class CallbackQuery(TelegramObject):
    """A press on an inline keyboard button."""

    id: str
    from_user: User = Field(..., alias="from")
    chat_instance: str
    message: Optional[Message] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None
    game_short_name: Optional[str] = None


class ShippingAddress(TelegramObject):
    country_code: str
    state: str
    city: str
    street_line1: str
    street_line2: str
    post_code: str


class OrderInfo(TelegramObject):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None


class ShippingQuery(TelegramObject):
    id: str
    from_user: User = Field(..., alias="from")
    invoice_payload: str
    shipping_address: ShippingAddress


class PreCheckoutQuery(TelegramObject):
    id: str
    from_user: User = Field(..., alias="from")
    currency: str
    total_amount: int
    invoice_payload: str
    shipping_option_id: Optional[str] = None
    order_info: Optional[OrderInfo] = None


# ── Update ───────────────────────────────────────────────────────────────────


class Update(TelegramObject):
    """An incoming update.

    At most **one** of the optional fields is present in any given update.
    Fields for update kinds not listed here are dropped on decode.
    """

    update_id: int
    message: Optional[Message] = None
    edited_message: Optional[Message] = None
    channel_post: Optional[Message] = None
    edited_channel_post: Optional[Message] = None
    inline_query: Optional[InlineQuery] = None
    chosen_inline_result: Optional[ChosenInlineResult] = None
    callback_query: Optional[CallbackQuery] = None
    shipping_query: Optional[ShippingQuery] = None
    pre_checkout_query: Optional[PreCheckoutQuery] = None
    poll: Optional[Poll] = None
    poll_answer: Optional[PollAnswer] = None
