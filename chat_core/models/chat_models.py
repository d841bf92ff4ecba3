from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ValidationResult(BaseModel):
    """The verdict of the InputGuard on a single piece of user input."""

    accepted: bool = Field(..., description="Whether the input may be processed at all.")
    error_message: Optional[str] = Field(
        None, description="Why the input was rejected. Populated when 'accepted' is False."
    )
    needs_clarification: bool = Field(
        False, description="The input is acceptable but too vague to send to the model."
    )
    clarification_prompt: Optional[str] = Field(
        None, description="A question asking the user for more detail."
    )

    @model_validator(mode="after")
    def check_fields(self):
        """Ensures that the correct field is populated based on the verdict."""
        if not self.accepted and not self.error_message:
            raise ValueError("Field 'error_message' is required when the input is rejected.")
        if self.needs_clarification and not self.clarification_prompt:
            raise ValueError(
                "Field 'clarification_prompt' is required when clarification is needed."
            )
        return self


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class ChatCompletion(BaseModel):
    """A successful response from a chat completion provider."""

    content: str
    model_id: str = ""
    finish_reason: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)


class RequestOptions(BaseModel):
    """Options carried through to the provider without interpretation."""

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def to_kwargs(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ChatSettings(BaseModel):
    """The validated `chat` section of the application configuration."""

    context_window_tokens: int = Field(4000, gt=0)
    system_prompt_dir: str = "assistant"
    enable_safety_features: bool = True
    primary_provider: str
    fallback_provider: Optional[str] = None
    request_options: RequestOptions = Field(default_factory=RequestOptions)


TurnStatus = Literal["noop", "command", "rejected", "clarification", "reply", "error", "quit"]


class TurnResult(BaseModel):
    """What a single iteration of the session loop produced for display."""

    status: TurnStatus
    content: str = ""
    usage: Optional[TokenUsage] = None
    total_tokens: Optional[int] = None
    near_token_limit: bool = False
    # The CommandKind value of a handled command
    command: Optional[str] = None
