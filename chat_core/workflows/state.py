from typing import List, Optional, TypedDict

from chat_core.memory.state import Message
from chat_core.models.chat_models import ChatCompletion, TurnResult, ValidationResult


class TurnState(TypedDict):
    """
    Represents the state of a single read-validate-respond turn.
    It is created for every input line and discarded once the turn ends.
    """

    # -- Inputs --
    user_input: str

    # -- Routing --
    is_command: bool
    validation: Optional[ValidationResult]

    # -- Exchange with the provider --
    window: List[Message]
    near_token_limit: bool
    completion: Optional[ChatCompletion]

    # -- Final Output --
    output: Optional[TurnResult]
