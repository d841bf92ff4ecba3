from pathlib import Path


class PromptManager:
    """
    Loads prompt templates from per-persona folders under a base directory.
    """

    def __init__(self, prompts_base_path: Path):
        if not prompts_base_path.is_dir():
            raise FileNotFoundError(f"Prompts base directory not found at: {prompts_base_path}")
        self.prompts_base_path = prompts_base_path

    def _read_file(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Prompt file not found at: {path}")
        except OSError as e:
            raise IOError(f"Error reading prompt file at {path}: {e}") from e

    def load_prompt(self, prompts_dir: str, filename: str) -> str:
        """
        Loads a single prompt file from a persona's prompt directory.

        Args:
            prompts_dir: The name of the persona's prompt directory.
            filename: The name of the file to load (e.g., 'system.prompt').

        Returns:
            The content of the prompt file, without surrounding whitespace.
        """
        prompt_dir = self.prompts_base_path / prompts_dir
        if not prompt_dir.is_dir():
            raise FileNotFoundError(f"Prompt directory '{prompts_dir}' not found at {prompt_dir}")

        return self._read_file(prompt_dir / filename).strip()

    def get_system_prompt(self, prompts_dir: str, filename: str = "system.prompt") -> str:
        """Loads the system prompt that opens every conversation."""
        return self.load_prompt(prompts_dir, filename)
