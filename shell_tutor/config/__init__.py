"""
Configuration System

Manages configuration for shell-tutor with a layered approach.

Configuration Priority (highest to lowest):
    1. Programmatic (passed to TutorConfig())
    2. Config file (--config or SHELL_TUTOR_CONFIG_FILE, via TutorConfig.from_file)
    3. Environment variables (SHELL_TUTOR_* prefix, OPENAI_API_KEY)
    4. Built-in defaults

Modules:
    settings: TutorConfig class
    providers: Provider-specific model defaults
    pricing: Model pricing for cost telemetry
"""

from shell_tutor.config.settings import TutorConfig

__all__ = ["TutorConfig"]
