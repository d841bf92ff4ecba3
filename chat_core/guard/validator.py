import logging
import re
from typing import Optional

from chat_core.guard.rules import GuardRules
from chat_core.models.chat_models import ValidationResult

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_SCRIPT_BLOCK = re.compile(r"<script.*?</script>", re.IGNORECASE)
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


class InputGuard:
    """
    Gates free-text user input before it is stored or sent to the model.
    """

    def __init__(self, rules: Optional[GuardRules] = None):
        self.rules = rules or GuardRules()
        special = re.escape(self.rules.special_characters)
        self._special_run = re.compile(
            f"[{special}]{{{self.rules.special_char_run_length},}}"
        )

    def validate_input(self, text: str) -> ValidationResult:
        """
        Decides whether the input can be processed.

        Checks run in order: emptiness, length, unsafe content, vagueness.
        The reason an input was flagged as unsafe is logged but never shown
        to the user.

        Args:
            text: The raw line the user typed.

        Returns:
            A ValidationResult. Vague input is accepted but needs clarification.
        """
        if not text or not text.strip():
            return ValidationResult(accepted=False, error_message=self.rules.empty_input_message)

        if len(text) > self.rules.max_input_length:
            message = self.rules.too_long_message.format(max_input_length=self.rules.max_input_length)
            return ValidationResult(accepted=False, error_message=message)

        if self.contains_risky_content(text):
            return ValidationResult(accepted=False, error_message=self.rules.unsafe_input_message)

        if self._is_vague(text):
            return ValidationResult(
                accepted=True,
                needs_clarification=True,
                clarification_prompt=self.get_clarification_prompt(text),
            )

        return ValidationResult(accepted=True)

    def sanitize_input(self, text: str) -> str:
        """Normalizes whitespace and strips script-injection patterns."""
        if not text or not text.strip():
            return ""

        text = _WHITESPACE.sub(" ", text).strip()
        text = _SCRIPT_BLOCK.sub("", text)
        text = _JAVASCRIPT_SCHEME.sub("", text)
        text = self._special_run.sub("", text)
        # Removals above can leave double or trailing spaces behind.
        return _WHITESPACE.sub(" ", text).strip()

    def contains_risky_content(self, text: str) -> bool:
        lower_text = text.lower()

        for keyword in self.rules.risky_keywords:
            if keyword in lower_text:
                logger.info(f"Input flagged: contains blocked keyword '{keyword}'.")
                return True

        profanity_hits = self._count_profanity(lower_text)
        if profanity_hits > self.rules.max_profanity_hits:
            logger.info(f"Input flagged: {profanity_hits} profanity occurrences.")
            return True

        for phrase in self.rules.prompt_injection_phrases:
            if phrase in lower_text:
                logger.info(f"Input flagged: possible prompt injection '{phrase}'.")
                return True

        return False

    def get_clarification_prompt(self, text: str) -> str:
        lower_text = text.lower()
        word_count = len(lower_text.split())

        if "help" in lower_text and word_count < 3:
            return "I'd be happy to help! Could you tell me specifically what you need assistance with?"

        if "how" in lower_text and word_count < 4:
            return "Could you be more specific about what process or topic you'd like to learn about?"

        if "what" in lower_text and word_count < 4:
            return "Could you provide more context about what specific information you're seeking?"

        if len(lower_text) < 10:
            return "Could you provide more details about what you're looking for?"

        return "Could you elaborate on your question or provide more context so I can give you a better response?"

    def _is_vague(self, text: str) -> bool:
        lower_text = text.lower()
        if len(lower_text.split()) >= self.rules.vague_word_limit:
            return False
        return any(phrase in lower_text for phrase in self.rules.vague_phrases)

    def _count_profanity(self, lower_text: str) -> int:
        # Substring occurrences of every listed word, added together.
        return sum(lower_text.count(word) for word in self.rules.profanity_words)
