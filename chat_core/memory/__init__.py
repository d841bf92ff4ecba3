from .service import ConversationStore
from .state import ConversationState, Message, Role, Summary

__all__ = ["ConversationStore", "ConversationState", "Message", "Role", "Summary"]
