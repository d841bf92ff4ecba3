from dataclasses import dataclass
from typing import Optional, Tuple

from omegaconf import DictConfig, OmegaConf

RISKY_KEYWORDS = (
    "hack", "exploit", "malware", "virus", "illegal", "harmful", "dangerous",
    "suicide", "self-harm", "violence", "bomb", "weapon", "drug", "abuse",
)

# Kept minimal on purpose; extend through safety.yaml
PROFANITY_WORDS = ("damn", "hell")

PROMPT_INJECTION_PHRASES = (
    "ignore previous instructions",
    "forget your role",
    "act as if you are",
)

VAGUE_PHRASES = ("help", "what", "how", "tell me", "explain", "hi", "hello")

SPECIAL_CHARACTERS = "!@#$%^&*()"


@dataclass(frozen=True)
class GuardRules:
    """The keyword tables, thresholds and messages used by the InputGuard."""
    max_input_length: int = 4000
    max_profanity_hits: int = 2
    vague_word_limit: int = 3
    special_char_run_length: int = 3
    risky_keywords: Tuple[str, ...] = RISKY_KEYWORDS
    profanity_words: Tuple[str, ...] = PROFANITY_WORDS
    prompt_injection_phrases: Tuple[str, ...] = PROMPT_INJECTION_PHRASES
    vague_phrases: Tuple[str, ...] = VAGUE_PHRASES
    special_characters: str = SPECIAL_CHARACTERS
    empty_input_message: str = "Input cannot be empty."
    # Formatted with the rule's own fields
    too_long_message: str = "Input is too long. Please keep messages under {max_input_length} characters."
    unsafe_input_message: str = (
        "Your message contains content that cannot be processed. "
        "Please rephrase your request in a safe and appropriate manner."
    )

    @classmethod
    def from_config(cls, safety_config: Optional[DictConfig]) -> "GuardRules":
        """
        Builds the rules from the `safety` section of the app config.
        Keys missing from the config keep their defaults.
        """
        if safety_config is None:
            return cls()

        overrides = OmegaConf.to_container(safety_config, resolve=True)
        if not isinstance(overrides, dict):
            raise ValueError("The safety configuration must be a mapping.")

        unknown = set(overrides) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown safety configuration keys: {sorted(unknown)}")

        return cls(**{
            key: tuple(value) if isinstance(value, list) else value
            for key, value in overrides.items()
        })
