from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from langgraph.graph import StateGraph, END
from omegaconf import DictConfig

from chat_core.commands import CommandInterpreter
from chat_core.guard import GuardRules, InputGuard
from chat_core.llm import ChatCompletionProvider, PromptManager, ProviderError
from chat_core.memory import ConversationStore, Role
from chat_core.models.chat_models import ChatSettings, TurnResult, ValidationResult
from chat_core.utils.config_parser import load_chat_settings
from chat_core.workflows.state import TurnState

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """
    Drives one interactive chat session, built using LangGraph.

    Every input line runs through a small graph: commands are dispatched to
    the CommandInterpreter, chat text is gated by the InputGuard, and accepted
    text is stored, windowed and sent to the provider. The session owns its
    ConversationStore; nothing is shared between sessions.
    """

    def __init__(
        self,
        provider: ChatCompletionProvider,
        settings: ChatSettings,
        conversation: Optional[ConversationStore] = None,
        guard: Optional[InputGuard] = None,
        interpreter: Optional[CommandInterpreter] = None,
        system_prompt: str = "",
    ):
        self.provider = provider
        self.settings = settings
        self.conversation = conversation or ConversationStore()
        self.guard = guard or InputGuard()
        self.interpreter = interpreter or CommandInterpreter()
        self.system_prompt = system_prompt

        self.workflow = self._build_graph()
        self.app = self.workflow.compile()

    @classmethod
    def from_config(
        cls,
        app_config: DictConfig,
        provider: ChatCompletionProvider,
        prompts_base_path: Path,
    ) -> SessionOrchestrator:
        settings = load_chat_settings(app_config)
        system_prompt = PromptManager(prompts_base_path).get_system_prompt(settings.system_prompt_dir)
        guard = InputGuard(GuardRules.from_config(app_config.get("safety")))
        return cls(
            provider=provider,
            settings=settings,
            guard=guard,
            system_prompt=system_prompt,
        )

    def _build_graph(self) -> StateGraph:
        graph = StateGraph(TurnState)

        graph.add_node("classify", self.classify_node)
        graph.add_node("command", self.command_node)
        graph.add_node("validate", self.validate_node)
        graph.add_node("send", self.send_node)

        graph.set_entry_point("classify")
        graph.add_conditional_edges(
            "classify",
            self.decide_route,
            {"blank": END, "command": "command", "chat": "validate"},
        )
        graph.add_conditional_edges(
            "validate",
            self.decide_after_validation,
            {"send": "send", "end": END},
        )
        graph.add_edge("command", END)
        graph.add_edge("send", END)

        return graph

    def start(self):
        """Opens the conversation with the configured system prompt."""
        if self.system_prompt:
            self.conversation.add_message(Role.SYSTEM, self.system_prompt)
        logger.info("Chat session started.")

    def classify_node(self, state: TurnState) -> Dict[str, Any]:
        user_input = state["user_input"]
        if not user_input or not user_input.strip():
            return {"output": TurnResult(status="noop")}
        return {"is_command": self.interpreter.is_command(user_input)}

    def command_node(self, state: TurnState) -> Dict[str, Any]:
        command = self.interpreter.parse_command(state["user_input"])
        result = self.interpreter.handle_command(command, self.conversation)
        status = "quit" if result.should_exit else "command"
        return {
            "output": TurnResult(status=status, content=result.message, command=result.kind.value)
        }

    def validate_node(self, state: TurnState) -> Dict[str, Any]:
        if not self.settings.enable_safety_features:
            return {"validation": ValidationResult(accepted=True)}

        validation = self.guard.validate_input(state["user_input"])
        if not validation.accepted:
            logger.info("Input rejected by the input guard.")
            return {
                "validation": validation,
                "output": TurnResult(status="rejected", content=validation.error_message),
            }
        if validation.needs_clarification:
            return {
                "validation": validation,
                "output": TurnResult(
                    status="clarification", content=validation.clarification_prompt
                ),
            }
        return {"validation": validation}

    async def send_node(self, state: TurnState) -> Dict[str, Any]:
        """Stores the user message, sends the context window and stores the reply."""
        user_input = state["user_input"]
        if self.settings.enable_safety_features:
            user_input = self.guard.sanitize_input(user_input)

        max_tokens = self.settings.context_window_tokens
        self.conversation.add_message(Role.USER, user_input)
        window = self.conversation.get_window(max_tokens)
        near_token_limit = self.conversation.is_near_token_limit(max_tokens)

        try:
            completion = await self.provider.complete(window, self.settings.request_options)
        except ProviderError as e:
            # The user message stays in the history so the next turn keeps its context.
            logger.error(f"Error getting AI response: {e}", exc_info=True)
            return {
                "window": window,
                "near_token_limit": near_token_limit,
                "output": TurnResult(
                    status="error", content=str(e), near_token_limit=near_token_limit
                ),
            }

        self.conversation.add_message(Role.ASSISTANT, completion.content or "")
        return {
            "window": window,
            "near_token_limit": near_token_limit,
            "completion": completion,
            "output": TurnResult(
                status="reply",
                content=completion.content,
                usage=completion.usage,
                total_tokens=self.conversation.estimate_token_count(),
                near_token_limit=near_token_limit,
            ),
        }

    def decide_route(self, state: TurnState) -> str:
        if state.get("output") is not None:
            return "blank"
        return "command" if state.get("is_command") else "chat"

    def decide_after_validation(self, state: TurnState) -> str:
        return "end" if state.get("output") is not None else "send"

    async def handle_input(self, user_input: str) -> TurnResult:
        """Runs one iteration of the session loop for a single input line."""
        initial_state: TurnState = {
            "user_input": user_input,
            "is_command": False,
            "validation": None,
            "window": [],
            "near_token_limit": False,
            "completion": None,
            "output": None,
        }
        final_state = await self.app.ainvoke(initial_state)
        output = final_state.get("output")
        if output is None:
            return TurnResult(status="error", content="The turn ended unexpectedly.")
        return output

    async def run(self, read_line: Callable[[], str], display: Callable[[TurnResult], None]):
        """
        Reads, handles and displays input lines until the user quits or the
        input is exhausted. Returns instead of exiting so the host decides
        how the process ends.
        """
        while True:
            try:
                user_input = read_line()
            except EOFError:
                logger.info("Input closed. Ending session.")
                return

            result = await self.handle_input(user_input)
            display(result)
            if result.status == "quit":
                logger.info("Quit command received. Ending session.")
                return
