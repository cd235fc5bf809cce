"""Tests for mdai.models — no mocking needed."""

import pytest
from pydantic import ValidationError

from mdai.models import AIModel, get_model


class TestAIModel:
    def test_cost_per_million_tokens(self):
        model = get_model("gpt-4o-mini")
        assert model.prompt_cost(1_000_000) == pytest.approx(0.15)
        assert model.completion_cost(1_000_000) == pytest.approx(0.60)
        assert model.total_cost(1000, 500) == pytest.approx(0.00045)

    def test_missing_required_field_raises(self):
        with pytest.raises(ValidationError):
            AIModel(id="x", name="X")

    def test_default_currency(self):
        model = AIModel(id="x", name="X", prompt_price_per_1m=1.0, completion_price_per_1m=2.0)
        assert model.currency == "USD"


class TestRegistry:
    def test_get_model(self):
        assert get_model("gpt-4o").name == "GPT-4o"

    def test_unknown_model_raises(self):
        with pytest.raises(KeyError, match="model not found"):
            get_model("gpt-99")
