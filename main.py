import sys
import asyncio
import logging
from pathlib import Path
from dotenv import load_dotenv

# --- PATH SETUP ---
# Add the project root to the Python path to allow imports from 'chat_core'
project_root = Path(__file__).resolve().parent
sys.path.insert(0, str(project_root))

from chat_core.llm import LLMFactory, ProviderUnavailableError, connect_provider
from chat_core.models.chat_models import ChatSettings, TurnResult
from chat_core.utils.config_parser import PROJECT_ROOT, PROMPTS_DIR, load_app_config, load_chat_settings
from chat_core.workflows.orchestrator import SessionOrchestrator

# --- LOGGING AND ENVIRONMENT SETUP ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# Suppress excessively noisy logs from underlying HTTP libraries for cleaner output
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

load_dotenv(PROJECT_ROOT / ".env")


def print_welcome_message(provider_name: str, model_name: str, settings: ChatSettings):
    """Prints the session banner."""
    print("\n--- AI Assistant: Interactive Chat ---")
    print("======================================")
    print(f"Provider: {provider_name}")
    print(f"Model: {model_name}")
    print(f"Context Window: {settings.context_window_tokens} tokens")
    print(f"Safety Features: {'Enabled' if settings.enable_safety_features else 'Disabled'}")


def display_results(result: TurnResult):
    """Prints the outcome of one turn in a structured way."""
    if result.status == "noop":
        return

    if result.status == "rejected":
        print(f"⚠️  {result.content}")

    elif result.status == "clarification":
        print(f"🤔 {result.content}")

    elif result.status == "error":
        if result.near_token_limit:
            print("ℹ️  Approaching token limit. Older messages will be summarized.")
        print(f"❌ Error getting AI response: {result.content}")
        print("Please try again or check your connection.")

    elif result.status == "reply":
        if result.near_token_limit:
            print("ℹ️  Approaching token limit. Older messages will be summarized.")
        print(f"\nAI: {result.content}")
        usage = result.usage
        print(
            f"\n📊 Tokens: Input={usage.input_tokens}, Output={usage.output_tokens}, "
            f"Total={result.total_tokens}"
        )

    else:
        # Command output, including the farewell on quit
        print(result.content)


def read_user_line() -> str:
    return input("\nYou: ")


async def run_session():
    """Connects to a provider and runs the interactive chat loop."""
    print("Initializing chat session (this may take a moment)...")
    try:
        app_config = load_app_config()
        settings = load_chat_settings(app_config)
        llm_factory = LLMFactory(app_config.llms)
        provider = await connect_provider(llm_factory, settings)
        orchestrator = SessionOrchestrator.from_config(
            app_config=app_config, provider=provider, prompts_base_path=PROMPTS_DIR
        )
    except ProviderUnavailableError as e:
        logger.critical("No chat provider could be reached", exc_info=True)
        print(f"\nFATAL: Failed to initialize AI chat model. {e}")
        return
    except Exception as e:
        logger.critical("Failed to initialize chat session", exc_info=True)
        print(f"\nFATAL: Could not initialize the system. Error: {e}")
        return

    print_welcome_message(provider.name, provider.model_name, settings)
    print("\n" + orchestrator.interpreter.get_help_text())
    print("\nChat started! Type your message or use commands starting with ':'")
    print("=====================================")

    orchestrator.start()
    await orchestrator.run(read_user_line, display_results)


def main():
    try:
        asyncio.run(run_session())
    except KeyboardInterrupt:
        print("\n\nSession interrupted by user. Goodbye!")


if __name__ == "__main__":
    main()
