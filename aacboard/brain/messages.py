"""
Internal message representation for completion prompts.

Ollama's /api/generate takes a single prompt string plus an optional system
prompt; conversation history is kept as messages[] while the prompt is
assembled and flattened at the end.

Usage:
    from aacboard.brain.messages import msg_user, msg_assistant, flatten_messages

    messages = [msg_assistant("I made a button for 'hello'."), msg_user("thanks")]
    prompt_string = flatten_messages(messages, include_role_headers=True)
"""
from typing import Iterable, List, Literal, TypedDict

from aacboard.core.board import ConversationTurn


Role = Literal["system", "user", "assistant"]


class Message(TypedDict):
    """
    A single message in the internal conversation representation.

    Attributes:
        role: One of "system", "user", or "assistant"
        content: The text content of the message
    """
    role: Role
    content: str


def msg_system(content: str) -> Message:
    return {"role": "system", "content": content}


def msg_user(content: str) -> Message:
    return {"role": "user", "content": content}


def msg_assistant(content: str) -> Message:
    return {"role": "assistant", "content": content}


def messages_from_history(history: Iterable[ConversationTurn], limit: int) -> List[Message]:
    """Most recent `limit` turns of board history, oldest first."""
    turns = list(history)
    if limit > 0:
        turns = turns[-limit:]
    messages: List[Message] = []
    for turn in turns:
        if turn.role == "assistant":
            messages.append(msg_assistant(turn.content))
        else:
            messages.append(msg_user(turn.content))
    return messages


def flatten_messages(
    messages: List[Message],
    include_role_headers: bool = False,
    block_separator: str = "\n\n"
) -> str:
    """
    Flatten a list of messages into a single prompt string for Ollama.

    Args:
        messages: List of Message dicts to flatten
        include_role_headers: If True, prefix each block with "User:", "Assistant:", etc.
        block_separator: String to place between message blocks

    Returns:
        A single string suitable for Ollama's prompt field.

    Example (with headers):
        >>> flatten_messages([msg_user("Hello")], include_role_headers=True)
        'User:\\nHello'
    """
    if not messages:
        return ""

    parts = []
    for msg in messages:
        content = msg.get("content", "").strip()
        if not content:
            continue

        if include_role_headers:
            role_header = msg.get("role", "user").capitalize()
            parts.append(f"{role_header}:\n{content}")
        else:
            parts.append(content)

    return block_separator.join(parts)
