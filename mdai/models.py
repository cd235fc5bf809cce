"""Pydantic models for chat models and their pricing."""

from pydantic import BaseModel


class AIModel(BaseModel):
    """Chat model with USD prices per 1M tokens."""

    id: str
    name: str
    prompt_price_per_1m: float
    completion_price_per_1m: float
    currency: str = "USD"

    def prompt_cost(self, tokens: int) -> float:
        return tokens / 1_000_000 * self.prompt_price_per_1m

    def completion_cost(self, tokens: int) -> float:
        return tokens / 1_000_000 * self.completion_price_per_1m

    def total_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        return self.prompt_cost(prompt_tokens) + self.completion_cost(completion_tokens)


MODELS: dict[str, AIModel] = {
    m.id: m
    for m in [
        AIModel(id="gpt-4o-mini", name="GPT-4o-mini",
                prompt_price_per_1m=0.15, completion_price_per_1m=0.60),
        AIModel(id="gpt-4o", name="GPT-4o",
                prompt_price_per_1m=2.50, completion_price_per_1m=10.00),
        AIModel(id="gpt-4-turbo", name="GPT-4 Turbo",
                prompt_price_per_1m=10.00, completion_price_per_1m=30.00),
        AIModel(id="gpt-3.5-turbo", name="GPT-3.5-turbo",
                prompt_price_per_1m=0.50, completion_price_per_1m=1.50),
        AIModel(id="claude-3-haiku-20240307", name="Claude 3 Haiku",
                prompt_price_per_1m=0.25, completion_price_per_1m=1.25),
        AIModel(id="claude-3-sonnet-20240229", name="Claude 3 Sonnet",
                prompt_price_per_1m=3.00, completion_price_per_1m=15.00),
        AIModel(id="claude-3-opus-20240229", name="Claude 3 Opus",
                prompt_price_per_1m=15.00, completion_price_per_1m=75.00),
    ]
}


def get_model(model_id: str) -> AIModel:
    """Look up a model by id. Raises KeyError for unknown ids."""
    try:
        return MODELS[model_id]
    except KeyError:
        raise KeyError(f"model not found: {model_id}") from None
