"""
Utility Functions

Modules:
    cost_telemetry: Request-scoped usage/cost collection
    token_count: tiktoken-based token counting for telemetry fallbacks
"""

from shell_tutor.utils.cost_telemetry import CostCollector, telemetry_collector, telemetry_stage
from shell_tutor.utils.token_count import count_chat_tokens, count_text_tokens

__all__ = [
    "CostCollector",
    "telemetry_collector",
    "telemetry_stage",
    "count_chat_tokens",
    "count_text_tokens",
]
