import streamlit as st


def display_debug_sidebar():
    """Renders the debug sidebar with the conversation memory of this session."""
    with st.sidebar:
        st.title("🛠️ Debug Panel")

        orchestrator = st.session_state.get("orchestrator")
        if orchestrator is None:
            return

        conversation = orchestrator.conversation
        st.metric("Estimated tokens", conversation.estimate_token_count())

        with st.expander("🧠 Summaries", expanded=False):
            st.json([summary.model_dump() for summary in conversation.get_summaries()])

        with st.expander("📜 Raw Messages", expanded=False):
            st.json([message.model_dump(mode="json") for message in conversation.get_messages()])
