"""
TutorConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> config = TutorConfig()

    >>> # Explicit configuration
    >>> config = TutorConfig(llm_model="gpt-4o-mini", prompt_host="lab")

    >>> # From config file
    >>> config = TutorConfig.from_file("./shell-tutor.toml")

Environment Variables:
    SHELL_TUTOR_LLM_PROVIDER - LLM provider name
    SHELL_TUTOR_LLM_MODEL - Model that improvises terminal output
    SHELL_TUTOR_GUIDE_MODEL - Model that writes tutorials
    SHELL_TUTOR_PROMPT_HOST - Host name shown in the prompt
    SHELL_TUTOR_TREE_FILE - JSON seed tree to start from
    SHELL_TUTOR_COST_DEBUG_WARN_THRESHOLD_USD - Cost warning threshold
    SHELL_TUTOR_CONFIG_FILE - TOML file read by the CLI
    OPENAI_API_KEY - OpenAI API key (standard name)
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from shell_tutor.config.providers import PROVIDER_DEFAULTS
from shell_tutor.errors import InitializationError


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


class TutorConfig:
    """Configuration for a shell-tutor session."""

    # === LLM Configuration ===

    llm_provider: str = "openai"
    """LLM provider: only "openai" is implemented"""

    llm_model: str = "gpt-4o-mini"
    """Model that improvises terminal output"""

    guide_model: str = "gpt-4o"
    """Model that writes step-by-step tutorials"""

    llm_temperature: float = 0.0
    """Sampling temperature for terminal output"""

    llm_max_tokens: int = 1024
    """Maximum tokens in one terminal response"""

    guide_max_tokens: int = 2048
    """Maximum tokens in one tutorial"""

    llm_history_turns: int = 20
    """Completed command/response exchanges replayed with each command"""

    # === API Keys ===

    openai_api_key: str | None = None

    # === Session Configuration ===

    prompt_user: str = "user"
    """User name shown in the prompt"""

    prompt_host: str = "tutor"
    """Host name shown in the prompt"""

    navigation_command: str = "cd"
    """The one command resolved locally instead of by the response engine"""

    tree_file: str | None = None
    """Optional JSON seed tree (default: built-in layout)"""

    # === Cost Telemetry Configuration ===

    cost_debug: bool = False
    """Collect per-call cost records and report them at the end of a session"""

    cost_debug_warn_threshold_usd: float | None = None
    """Optional warning threshold for estimated session cost"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        self.openai_api_key = os.getenv("OPENAI_API_KEY")

        if provider := os.getenv("SHELL_TUTOR_LLM_PROVIDER"):
            self.llm_provider = provider
            defaults = PROVIDER_DEFAULTS.get(provider, {})
            self.llm_model = defaults.get("llm_model", self.llm_model)
            self.guide_model = defaults.get("guide_model", self.guide_model)
        if model := os.getenv("SHELL_TUTOR_LLM_MODEL"):
            self.llm_model = model
        if model := os.getenv("SHELL_TUTOR_GUIDE_MODEL"):
            self.guide_model = model
        if host := os.getenv("SHELL_TUTOR_PROMPT_HOST"):
            self.prompt_host = host
        if tree_file := os.getenv("SHELL_TUTOR_TREE_FILE"):
            self.tree_file = tree_file
        if threshold := os.getenv("SHELL_TUTOR_COST_DEBUG_WARN_THRESHOLD_USD"):
            self.cost_debug_warn_threshold_usd = float(threshold)

    def require_api_key(self) -> str:
        """
        Return the API key for the configured provider.

        Raises:
            InitializationError: If the provider is unsupported or the key is missing
        """
        if self.llm_provider != "openai":
            raise InitializationError(
                f"Unsupported LLM provider: {self.llm_provider!r}. Only 'openai' is available."
            )
        if not self.openai_api_key:
            raise InitializationError(
                "Missing API key. Set the OPENAI_API_KEY environment variable "
                "or add it to the [api_keys] section of your config file."
            )
        return self.openai_api_key

    @classmethod
    def from_file(cls, path: str | Path) -> "TutorConfig":
        """
        Load configuration from TOML file.

        The TOML file can contain any configuration option as a key.
        Nested sections are flattened with underscores.

        Example TOML:
            [llm]
            model = "gpt-4o-mini"
            temperature = 0.2

            [guide]
            model = "gpt-4o"

            [session]
            prompt_host = "lab"

            [api_keys]
            openai = "sk-..."

        Args:
            path: Path to TOML configuration file

        Returns:
            TutorConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = _load_toml(path)

        flat_config: dict[str, Any] = {}

        # Map section names to config key prefixes
        section_mapping = {
            "llm": "llm_",
            "guide": "guide_",
            "api_keys": "",  # api_keys.openai -> openai_api_key
            "session": "",
            "cost_telemetry": "cost_debug_",
        }

        for section, prefix in section_mapping.items():
            if section in data:
                for key, value in data[section].items():
                    if section == "api_keys":
                        flat_config[f"{key}_api_key"] = value
                    else:
                        flat_config[f"{prefix}{key}"] = value

        # Also support flat top-level keys
        for key, value in data.items():
            if key not in section_mapping and not isinstance(value, dict):
                flat_config[key] = value

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> "TutorConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        API keys are never written.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool | None]] = {
            "llm": {
                "provider": self.llm_provider,
                "model": self.llm_model,
                "temperature": self.llm_temperature,
                "max_tokens": self.llm_max_tokens,
                "history_turns": self.llm_history_turns,
            },
            "guide": {
                "model": self.guide_model,
                "max_tokens": self.guide_max_tokens,
            },
            "session": {
                "prompt_user": self.prompt_user,
                "prompt_host": self.prompt_host,
                "navigation_command": self.navigation_command,
                "tree_file": self.tree_file,
            },
            "cost_telemetry": {
                "warn_threshold_usd": self.cost_debug_warn_threshold_usd,
            },
        }

        lines = ["# shell-tutor configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
            lines.append("")

        lines.extend([
            "# API keys should be set via environment variables:",
            "# OPENAI_API_KEY",
            "",
        ])

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> "TutorConfig":
        """Return new config with specified overrides."""
        new_config = TutorConfig.__new__(TutorConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            setattr(new_config, key, value)
        return new_config
