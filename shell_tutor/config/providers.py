"""
Provider Configurations

Default models for each LLM provider.

When a provider is selected through SHELL_TUTOR_LLM_PROVIDER, its defaults
replace the built-in model names:
    >>> # SHELL_TUTOR_LLM_PROVIDER=openai
    >>> #   llm_model = "gpt-4o-mini"
    >>> #   guide_model = "gpt-4o"
"""

PROVIDER_DEFAULTS = {
    "openai": {
        "llm_model": "gpt-4o-mini",
        "guide_model": "gpt-4o",
    },
}
