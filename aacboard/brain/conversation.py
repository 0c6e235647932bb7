"""
Open-ended conversational fallback.

Used when nothing resolved to a board command (and for help requests). The
utterance goes to the completion service together with the serialized board
and the list of things the board assistant can do; the reply is returned
verbatim. Any failure degrades to the generic apology.
"""
from typing import Optional

from aacboard.brain.grid_prompt import describe_grid
from aacboard.brain.llm_engine import LLMEngine
from aacboard.brain.messages import flatten_messages, messages_from_history, msg_user
from aacboard.core.board import BoardSnapshot
from aacboard.core.commands import Command
from aacboard.core.composer import GENERIC_APOLOGY
from aacboard.core.config import Config
from aacboard.core.logger import get_logger


SYSTEM_PROMPT = """You are a friendly helper inside a communication board app for children and adults who are learning to communicate.

YOUR PERSONALITY:
- Warm and encouraging, like a favorite teacher or helpful friend
- Simple, clear language a child or a stressed parent could understand
- No technical jargon
- Brief: 1-2 sentences

WHAT YOU CAN DO (tell people about these!):
- Create buttons: "Just tell me what you want the button to say!"
- Remove or change buttons: "Say 'delete the water button' or 'delete the second button in the last row'"
- Change the voice: "I can make it a boy voice or girl voice, faster or slower"
- Help navigate: "I can take you to any part of the app"
- Focus on one word: "Say 'show only help' to practice just that word!"
- Restore all buttons: "Say 'bring back my buttons' when you're ready"
- Show visual stories: "Say 'show me a story about the dentist' to watch a calming story!"
- Change language: "Say 'switch to Spanish' to translate the whole board!"
- Watch First mode: "Say 'turn on watch first mode' to learn by watching first!"
- Modeling stats: "Say 'show my modeling stats' to see your progress!"
- Modeling tips: "Say 'show me how to model help' for a demonstration!"

CONTEXT:
- Users are often stressed parents, overwhelmed teachers, or people learning to communicate
- They want solutions, not technology
- If they seem frustrated, be extra supportive and offer specific help"""


class ConversationResponder:
    """Free-text reply for utterances that are not board commands."""

    def __init__(
        self,
        llm: Optional[LLMEngine],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        history_turns: Optional[int] = None,
    ):
        self.logger = get_logger()
        self.llm = llm
        self.max_tokens = max_tokens if max_tokens is not None else Config.CHAT_MAX_TOKENS
        self.temperature = temperature if temperature is not None else Config.CHAT_TEMPERATURE
        self.history_turns = history_turns if history_turns is not None else Config.HISTORY_TURNS

    def build_prompt(self, text: str, snapshot: BoardSnapshot, command: Optional[Command] = None) -> str:
        messages = messages_from_history(snapshot.history, self.history_turns)
        messages.append(msg_user(text))
        sections = [f"Board:\n{describe_grid(snapshot)}"]
        if command is not None:
            sections.append(f"Recognized request: {command.kind.value}")
        sections.append(flatten_messages(messages, include_role_headers=True))
        return "\n\n".join(sections)

    def reply(
        self,
        text: str,
        snapshot: BoardSnapshot,
        command: Optional[Command] = None,
        fallback: str = GENERIC_APOLOGY,
    ) -> str:
        """
        Conversational reply for `text`.

        Args:
            text: Normalized utterance
            snapshot: Board state (serialized into the prompt)
            command: Recognized command, if any (help requests)
            fallback: Text returned when the completion is unavailable

        Returns:
            Model reply verbatim, or `fallback`
        """
        if self.llm is None or not self.llm.enabled:
            return fallback

        try:
            reply = self.llm.complete(
                self.build_prompt(text, snapshot, command),
                system=SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            self.logger.warning(f"[CHAT] completion failed: {e}")
            return fallback

        if not reply:
            self.logger.debug("[CHAT] empty completion")
            return fallback
        return reply
