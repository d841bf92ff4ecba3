import streamlit as st
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

# --- PATH SETUP ---
# Add the project root (the parent of 'interface/') to the Python path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from chat_core.commands import CommandKind
from chat_core.llm import LLMFactory, connect_provider
from chat_core.utils.config_parser import PROJECT_ROOT, PROMPTS_DIR, load_app_config, load_chat_settings
from chat_core.workflows.orchestrator import SessionOrchestrator

from interface.sidebar import display_debug_sidebar
from interface.chat import display_chat_messages, display_turn_result, run_in_session_loop

# --- Page Configuration (Must be the first Streamlit command) ---
st.set_page_config(page_title="AI Assistant", page_icon="💬", layout="wide")

# --- Logging and Environment Setup ---
load_dotenv(PROJECT_ROOT / ".env")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


# --- Session State and Initialization ---
def initialize_session():
    """Creates one orchestrator, and so one conversation, per browser session."""
    if "initialized" not in st.session_state:
        try:
            app_config = load_app_config()
            settings = load_chat_settings(app_config)
            provider = run_in_session_loop(
                st.session_state, connect_provider(LLMFactory(app_config.llms), settings)
            )

            orchestrator = SessionOrchestrator.from_config(
                app_config=app_config, provider=provider, prompts_base_path=PROMPTS_DIR
            )
            orchestrator.start()

            st.session_state.orchestrator = orchestrator
            st.session_state.messages = []
            st.session_state.initialized = True
            logger.info("Streamlit session initialized successfully.")
        except Exception as e:
            logger.critical(f"Initialization Failed: {e}", exc_info=True)
            st.error(f"Application Initialization Failed: {e}")
            st.stop()


def handle_user_prompt(prompt: str):
    """Runs one turn of the session and records what should be shown."""
    st.session_state.messages.append({"role": "user", "content": prompt})
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            orchestrator = st.session_state.orchestrator
            result = run_in_session_loop(st.session_state, orchestrator.handle_input(prompt))

        if result.status == "noop":
            return

        display_turn_result(result)
        st.session_state.messages.append(
            {"role": "assistant", "content": result.content, "status": result.status}
        )

        if result.command == CommandKind.NEW:
            st.session_state.messages = []
        if result.status == "quit":
            # The next prompt starts a fresh session
            del st.session_state["initialized"]


# --- Main Application Execution ---
initialize_session()
display_debug_sidebar()

st.title("💬 AI Assistant")
st.caption("Type a message, or :help for commands")

display_chat_messages()

if prompt := st.chat_input("Send a message..."):
    handle_user_prompt(prompt)
