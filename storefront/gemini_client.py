from __future__ import annotations

from typing import Dict, List, Optional

import google.generativeai as genai

from .config import Settings

DEFAULT_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiClient:
    """Thin wrapper around the Gemini SDK with model caching and safety settings."""

    def __init__(self, settings: Settings) -> None:
        """Purpose: Configure the Gemini SDK and initialize the model cache.
        Inputs/Outputs: Input is Settings; no return value.
        Side Effects / State: Configures the SDK global API key and caches a model.
        Dependencies: Uses google.generativeai and Settings from config.
        Failure Modes: Raises ValueError if the API key or model name is missing.
        If Removed: The stylist chat cannot reach the generation service.
        Testing Notes: Validate missing key raises ValueError and models are cached.
        """
        # Configure API key and seed default model cache.
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required")
        genai.configure(api_key=settings.gemini_api_key)
        self._models: Dict[str, genai.GenerativeModel] = {}
        self._default_model = _normalize_model_name(settings.gemini_model)
        if not self._default_model:
            raise ValueError("GEMINI_MODEL is required")
        self._models[self._default_model] = genai.GenerativeModel(self._default_model)

    def generate_content(
        self,
        contents: List[dict],
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
    ) -> str:
        """Purpose: Generate a response from role-tagged contents.
        Inputs/Outputs: Input is a list of content entries and an optional system
            instruction; returns the stripped response text ("" when empty).
        Side Effects / State: May add a model to the internal cache.
        Dependencies: Uses genai.GenerativeModel.generate_content.
        Failure Modes: SDK/network errors propagate to the caller.
        If Removed: The conversation session has no text generator.
        Testing Notes: Empty or missing response.text should return "".
        """
        # A system instruction is bound at model construction, so such models are not cached.
        model_name = _normalize_model_name(model) if model else self._default_model
        if system_instruction:
            generative_model = genai.GenerativeModel(model_name, system_instruction=system_instruction)
        else:
            if model_name not in self._models:
                self._models[model_name] = genai.GenerativeModel(model_name)
            generative_model = self._models[model_name]

        response = generative_model.generate_content(
            contents,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            },
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        text: Optional[str] = getattr(response, "text", None)
        return (text or "").strip()


def _normalize_model_name(name: Optional[str]) -> str:
    """Strip a "models/" prefix and surrounding whitespace; "" for falsy input."""
    if not name:
        return ""
    cleaned = name.strip()
    if cleaned.startswith("models/"):
        return cleaned.split("/", 1)[1]
    return cleaned
