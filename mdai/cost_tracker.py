"""Cost and latency tracking for chat completion calls."""

import logging
from dataclasses import dataclass
from typing import Optional

from mdai.models import AIModel, get_model

logger = logging.getLogger(__name__)

# Model ids already reported as missing from the price table.
_unpriced: set[str] = set()


def lookup_pricing(model_id: str) -> Optional[AIModel]:
    """Registry entry for ``model_id``, or None with a one-time warning."""
    try:
        return get_model(model_id)
    except KeyError:
        if model_id not in _unpriced:
            _unpriced.add(model_id)
            logger.warning("no pricing for model %s, cost will be reported as N/A", model_id)
        return None


@dataclass
class CostRecord:
    model: str
    operation: str = ""         # "answer", "summarize", ...
    input_tokens: int = 0
    output_tokens: int = 0
    time_to_first_token: Optional[float] = None
    total_time: Optional[float] = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def prompt_cost_usd(self) -> Optional[float]:
        model = lookup_pricing(self.model)
        if not model:
            return None
        return model.prompt_cost(self.input_tokens)

    @property
    def completion_cost_usd(self) -> Optional[float]:
        model = lookup_pricing(self.model)
        if not model:
            return None
        return model.completion_cost(self.output_tokens)

    @property
    def cost_usd(self) -> Optional[float]:
        model = lookup_pricing(self.model)
        if not model:
            return None
        return model.total_cost(self.input_tokens, self.output_tokens)

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "operation": self.operation,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "cost_usd": round(self.cost_usd, 6) if self.cost_usd is not None else None,
            "ttft_s": round(self.time_to_first_token, 3) if self.time_to_first_token else None,
            "total_time_s": round(self.total_time, 3) if self.total_time else None,
        }

    def __str__(self) -> str:
        if self.cost_usd is not None:
            cost = (
                f"${self.cost_usd:.5f} "
                f"(Input: ${self.prompt_cost_usd:.5f}, Output: ${self.completion_cost_usd:.5f})"
            )
        else:
            cost = "N/A"
        ttft  = f"{self.time_to_first_token:.3f}s" if self.time_to_first_token is not None else "N/A"
        total = f"{self.total_time:.3f}s" if self.total_time is not None else "N/A"
        return (
            f"[{self.model}] {cost}  "
            f"input={self.input_tokens} tok  "
            f"output={self.output_tokens} tok  "
            f"ttft={ttft}  "
            f"total_time={total}"
        )
