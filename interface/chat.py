import asyncio
from typing import Any, Coroutine, MutableMapping

import streamlit as st

from chat_core.models.chat_models import TurnResult


def run_in_session_loop(session_state: MutableMapping, coroutine: Coroutine) -> Any:
    """
    Runs a coroutine on the event loop owned by one browser session.

    The provider client keeps pooled connections bound to the loop that opened
    them, so every call of a session must go through the same loop.
    """
    if "event_loop" not in session_state:
        session_state["event_loop"] = asyncio.new_event_loop()
    return session_state["event_loop"].run_until_complete(coroutine)


def display_turn_result(result: TurnResult):
    """Renders the outcome of a single turn inside the current chat message."""
    if result.status == "rejected":
        st.warning(result.content, icon="⚠️")
    elif result.status == "clarification":
        st.info(result.content, icon="🤔")
    elif result.status == "error":
        st.error(f"Error getting AI response: {result.content}")
    elif result.status in ("command", "quit"):
        st.code(result.content, language=None)
    else:
        st.markdown(result.content)

    if result.near_token_limit:
        st.caption("ℹ️ Approaching token limit. Older messages will be summarized.")
    if result.usage is not None:
        st.caption(
            f"📊 Tokens: Input={result.usage.input_tokens}, "
            f"Output={result.usage.output_tokens}, Total={result.total_tokens}"
        )


def display_chat_messages():
    """Renders the visible chat history of this browser session."""
    for message in st.session_state.get("messages", []):
        with st.chat_message(message["role"]):
            status = message.get("status")
            if status == "rejected":
                st.warning(message["content"], icon="⚠️")
            elif status == "clarification":
                st.info(message["content"], icon="🤔")
            elif status == "error":
                st.error(message["content"])
            elif status in ("command", "quit"):
                st.code(message["content"], language=None)
            else:
                st.markdown(message["content"])
