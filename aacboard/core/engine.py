"""aacboard.core.engine

Request pipeline for one utterance:

    normalize -> grammar table -> (delete/update shape only) arbiter -> compose
                                                          \\-> conversation fallback

The engine is a pure function of (utterance, snapshot) plus the optional
completion backend; it keeps no state between requests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from aacboard.brain.arbiter import Arbiter, ArbiterMatch, arbiter_mode
from aacboard.brain.conversation import ConversationResponder
from aacboard.brain.llm_engine import LLMEngine
from aacboard.core.board import BoardSnapshot
from aacboard.core.commands import Command, CommandKind
from aacboard.core.composer import GENERIC_APOLOGY, compose
from aacboard.core.grammar_router import normalize, route
from aacboard.core.logger import get_logger


@dataclass(frozen=True)
class EngineResult:
    command: Optional[Command]
    response: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "response": self.response,
            "command": self.command.to_dict() if self.command is not None else None,
        }
        if self.error:
            data["error"] = self.error
        return data


def suggestion_response(suggestions: List[str]) -> str:
    quoted = [f'"{s}"' for s in suggestions[:3]]
    if len(quoted) == 1:
        options = quoted[0]
    else:
        options = ", ".join(quoted[:-1]) + " or " + quoted[-1]
    return f"I couldn't tell which button you meant. Did you mean {options}?"


class CommandEngine:
    """Resolve utterances against a board snapshot."""

    def __init__(self, llm: Optional[LLMEngine] = None):
        self.logger = get_logger()
        self.llm = llm
        enabled = llm is not None and getattr(llm, "enabled", False)
        self.arbiter: Optional[Arbiter] = Arbiter(llm) if enabled else None
        self.responder = ConversationResponder(llm if enabled else None)

    def handle(self, utterance: str, snapshot: BoardSnapshot) -> EngineResult:
        """
        Resolve one utterance.

        Args:
            utterance: Raw text from speech recognition or typing
            snapshot: Immutable board state for this request

        Returns:
            EngineResult with the command (or None) and the response text
        """
        start_time = time.time()
        text = normalize(utterance)
        if not text:
            return EngineResult(None, GENERIC_APOLOGY)

        command = route(text, snapshot)

        if command is None:
            mode = arbiter_mode(text)
            if mode is not None and self.arbiter is not None:
                resolution = self.arbiter.resolve(text, snapshot, mode)
                if isinstance(resolution, ArbiterMatch):
                    command = Arbiter.build_command(resolution, mode)
                elif resolution.suggestions:
                    return EngineResult(None, suggestion_response(resolution.suggestions))

        if command is None:
            self.logger.debug(f"[ENGINE] '{text}' -> conversation fallback")
            return EngineResult(None, self.responder.reply(text, snapshot))

        if command.kind == CommandKind.HELP:
            response = self.responder.reply(text, snapshot, command, fallback=compose(command))
        else:
            response = compose(command)

        elapsed_ms = int((time.time() - start_time) * 1000)
        self.logger.info(f"[ENGINE] '{text}' -> {command.kind.value} ({elapsed_ms}ms)")
        return EngineResult(command, response)

    def handle_request(
        self,
        utterance: str,
        snapshot: Union[BoardSnapshot, Dict[str, Any], None] = None,
    ) -> EngineResult:
        """Request boundary: never raises, always answers."""
        try:
            if snapshot is None:
                snapshot = BoardSnapshot()
            elif isinstance(snapshot, dict):
                snapshot = BoardSnapshot.from_dict(snapshot)
            return self.handle(utterance, snapshot)
        except Exception as e:
            self.logger.error(f"[ENGINE] request failed: {e}")
            return EngineResult(None, GENERIC_APOLOGY, error="ai_error")
