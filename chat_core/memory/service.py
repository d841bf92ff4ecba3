import logging
from typing import List, Union

from chat_core.memory.state import ConversationState, Message, Role, Summary
from chat_core.memory.summarizer import CHARS_PER_TOKEN, estimate_tokens, summarize_messages

logger = logging.getLogger(__name__)

# Start warning about the budget at 80% of the context window
TOKEN_LIMIT_THRESHOLD = 0.8
# Tokens kept free for the model's own reply
RESPONSE_TOKEN_RESERVE = 500
SUMMARY_PREFIX = "Previous conversation summary: "


class ConversationStore:
    """
    A stateful service that owns the history of a single conversation and
    produces a context-budget-limited view of it for the model.

    Older turns that no longer fit the budget are compacted into summaries
    the next time a window is requested.
    """

    def __init__(self):
        self._state = ConversationState()
        self._next_position = 0

    def add_message(self, role: Union[Role, str], content: str) -> Message:
        """Appends a message to the history. No validation is performed here."""
        message = Message(role=Role(role), content=content, position=self._next_position)
        self._state.messages.append(message)
        self._next_position += 1
        return message

    def add(self, message: Message) -> Message:
        """Appends a prebuilt message, stamping it with the next position."""
        return self.add_message(message.role, message.content)

    def get_messages(self) -> List[Message]:
        return list(self._state.messages)

    def get_summaries(self) -> List[Summary]:
        return list(self._state.summaries)

    def remove_last_user_message(self) -> bool:
        """
        Removes the most recent user message, if any.

        Returns:
            True if a message was removed, False if there was none.
        """
        messages = self._state.messages
        for index in range(len(messages) - 1, -1, -1):
            if messages[index].role == Role.USER:
                del messages[index]
                return True
        return False

    def clear_conversation(self):
        self._state.messages.clear()
        self._state.summaries.clear()
        self._next_position = 0
        logger.info("Conversation cleared.")

    def estimate_token_count(self) -> int:
        # Only the raw history is counted; summarized text is not included.
        total_chars = sum(len(m.content or "") for m in self._state.messages)
        return total_chars // CHARS_PER_TOKEN

    def is_near_token_limit(self, max_tokens: int) -> bool:
        return self.estimate_token_count() > max_tokens * TOKEN_LIMIT_THRESHOLD

    def get_window(self, max_tokens: int) -> List[Message]:
        """
        Constructs the ordered list of messages to send to the model.

        Every summary is emitted first as a system message, followed by the
        most recent raw messages that fit in what is left of the budget. When
        an older message no longer fits, everything before it is summarized
        and removed from the raw history.

        Args:
            max_tokens: The context window of the model, in tokens.

        Returns:
            The summaries (as system messages) followed by the recent messages,
            oldest first.
        """
        window = [
            Message(role=Role.SYSTEM, content=f"{SUMMARY_PREFIX}{summary.text}")
            for summary in self._state.summaries
        ]
        window.extend(self._get_recent_messages_that_fit(max_tokens))
        return window

    def _get_recent_messages_that_fit(self, max_tokens: int) -> List[Message]:
        messages = self._state.messages
        summary_tokens = sum(estimate_tokens(s.text) for s in self._state.summaries)
        available_tokens = max_tokens - summary_tokens - RESPONSE_TOKEN_RESERVE

        recent: List[Message] = []
        current_tokens = 0
        for index in range(len(messages) - 1, -1, -1):
            message_tokens = estimate_tokens(messages[index].content)
            if current_tokens + message_tokens > available_tokens:
                if index > 0:
                    self._trigger_summarization(index)
                break
            recent.insert(0, messages[index])
            current_tokens += message_tokens
        return recent

    def _trigger_summarization(self, end_index: int):
        """Compacts the messages before `end_index` into a new summary."""
        evicted = self._state.messages[:end_index]
        if not evicted:
            return

        summary = summarize_messages(evicted)
        self._state.summaries.append(summary)
        del self._state.messages[:end_index]
        logger.info(
            f"Summarized {len(evicted)} older messages "
            f"(~{summary.approximate_tokens} tokens). Summary: {summary.text}"
        )
