"""Stylist conversation session.

Role:
    Owns the append-only turn log for one shopper, builds the generation request
    (catalog listing plus a wishlist personalization hint) and hands assistant
    replies to the segmenter for product linking.

Concurrency contract:
    ``send`` is the only suspending operation. The ``in_flight`` flag is set
    before the first await, and a second ``send`` while it is set raises
    SessionBusyError without touching the log, so assistant turns cannot
    interleave. There is no cancellation: a reply that arrives late is still
    appended.

Failure contract:
    Any generator error becomes the fixed OFFLINE_REPLY turn and is logged with
    its traceback; ``send`` never raises for service failures.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from .catalog import Catalog, Product
from .models import ConversationTurn
from .prompt_loader import render_prompt
from .segmenter import TextSegment, segment

logger = logging.getLogger("lumina.chat")

GREETING_TEMPLATE = (
    "Hi there! I'm your {brand} Personal Stylist. I've synced with your preferences. "
    "How can I help you style your day?"
)
EMPTY_REPLY = "I'm having a brief moment of reflection. How else can I assist your style journey?"
OFFLINE_REPLY = (
    "I'm offline for a quick wardrobe change! Feel free to browse our New Arrivals in the meantime."
)
NO_FAVORITES_HINT = "The user hasn't saved any favorites yet."
INSTRUCTION_FILE = "stylist_instruction.txt"


class SessionBusyError(RuntimeError):
    """Raised when send() is called while a previous request is still in flight."""


class TextGenerator(Protocol):
    def generate_content(
        self,
        contents: List[dict],
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        ...


def build_catalog_context(products: Sequence[Product]) -> str:
    """Render one "- name (price): description" line per product."""
    return "\n".join(f"- {p.name} ({p.price}): {p.description}" for p in products)


def build_personalization_hint(favorites: Sequence[Product]) -> str:
    if not favorites:
        return NO_FAVORITES_HINT
    names = ", ".join(product.name for product in favorites)
    return f"The user currently has these favorites saved: {names}."


class ConversationSession:
    def __init__(
        self,
        generator: TextGenerator,
        catalog: Catalog,
        favorites: Callable[[], Sequence[Product]],
        prompts_dir: Path,
        brand_name: str,
        model: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        """Purpose: Initialize a conversation with the greeting turn.
        Inputs/Outputs: Inputs are the text generator, catalog, a callable
            returning the current wishlisted products, the prompts directory,
            brand name, and optional model/session id; no return value.
        Side Effects / State: Seeds the turn log with one assistant greeting.
        Dependencies: Uses render_prompt for the system instruction.
        Failure Modes: None at init; the template is read on first send.
        If Removed: The API has no stylist chat.
        Testing Notes: A fresh session has exactly one assistant turn.
        """
        self.session_id = session_id or uuid.uuid4().hex
        self._generator = generator
        self._catalog = catalog
        self._favorites = favorites
        self._instruction_path = prompts_dir / INSTRUCTION_FILE
        self._brand_name = brand_name
        self._model = model
        self._in_flight = False
        self._turns: List[ConversationTurn] = []
        self._append("assistant", GREETING_TEMPLATE.format(brand=brand_name))

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def turns(self) -> List[ConversationTurn]:
        return list(self._turns)

    def segments_for(self, turn: ConversationTurn) -> List[TextSegment]:
        return segment(turn.text, self._catalog)

    def build_system_instruction(self) -> str:
        return render_prompt(
            self._instruction_path,
            brand=self._brand_name,
            catalog=build_catalog_context(self._catalog.products),
            personalization=build_personalization_hint(self._favorites()),
        )

    async def send(self, user_text: str) -> str:
        """Purpose: Record a user message and the stylist's reply.
        Inputs/Outputs: Input is the user text; output is the assistant text
            appended to the log (reply, EMPTY_REPLY, or OFFLINE_REPLY).
        Side Effects / State: Appends two turns; toggles in_flight around the call.
        Dependencies: Runs the blocking generator in a worker thread.
        Failure Modes: Blank text raises ValueError; a concurrent call raises
            SessionBusyError; generator errors are logged and never raised.
        If Removed: Chat requests cannot reach the generation service.
        Testing Notes: Use a fake generator that raises, returns "", or blocks.
        """
        # Guard first so a rejected call leaves the log untouched.
        if self._in_flight:
            logger.warning("session=%s step=send status=rejected reason=in_flight", self.session_id)
            raise SessionBusyError("A stylist reply is still in progress")
        message = user_text.strip()
        if not message:
            raise ValueError("Message must not be empty")

        self._in_flight = True
        try:
            self._append("user", message)
            logger.info("session=%s question=%s", self.session_id, message)
            answer = await self._generate(message)
            self._append("assistant", answer)
            logger.info("session=%s answer=%s", self.session_id, answer)
            return answer
        finally:
            self._in_flight = False

    async def _generate(self, message: str) -> str:
        contents = [{"role": "user", "parts": [{"text": message}]}]
        try:
            system_instruction = self.build_system_instruction()
            answer = await asyncio.to_thread(
                self._generator.generate_content,
                contents,
                model=self._model,
                system_instruction=system_instruction,
            )
        except Exception:
            logger.exception("session=%s step=generation route=exception", self.session_id)
            return OFFLINE_REPLY
        answer = (answer or "").strip()
        if not answer:
            logger.info("session=%s step=generation route=empty_reply", self.session_id)
            return EMPTY_REPLY
        return answer

    def _append(self, role: str, text: str) -> ConversationTurn:
        turn = ConversationTurn(role=role, text=text, timestamp=time.time())
        self._turns.append(turn)
        return turn
