"""Integration tests for LLMClient with Groq API.

These tests require a valid GROQ_API_KEY in the environment.
They will be skipped if the API key is not available.
"""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
from services.llm_client import LLMClient, LLMResponse


@pytest.mark.skipif(
    not os.getenv("GROQ_API_KEY"),
    reason="GROQ_API_KEY not set in environment"
)
class TestLLMClientIntegration:
    """Integration tests for LLMClient with real Groq API."""

    @pytest.fixture
    def client(self):
        """Create LLMClient instance."""
        return LLMClient()

    def test_chat_about_document(self, client):
        prompt = LLMClient.build_chat_prompt(
            "--- Page 1 ---\nThe invoice total is 42 euros.\n\n",
            "What is the invoice total?"
        )

        response = client.generate(
            prompt=prompt,
            system_instruction="You are OK PDF AI. Help the user with their document.",
            max_tokens=50
        )

        assert isinstance(response, LLMResponse)
        assert "42" in response.text
        assert response.tokens_input > 0
        assert response.tokens_output > 0

    def test_translate(self, client):
        response = client.generate(prompt=LLMClient.build_translate_prompt("Good morning"), max_tokens=50)

        assert len(response.text) > 0
