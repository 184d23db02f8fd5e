"""
Assistant persona configuration: tone and reply length.

Passed to the engine at construction; each option maps to a token budget and a
phrasing instruction placed in the system prompts.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict

from app_config import (
    ASSISTANT_NAME, ASSISTANT_TONE, ASSISTANT_RESPONSE_LENGTH, ASSISTANT_LANGUAGE,
)


class Tone(Enum):
    PROFESSIONAL = "professional"
    FRIENDLY     = "friendly"
    ENTHUSIASTIC = "enthusiastic"
    CASUAL       = "casual"


class ResponseLength(Enum):
    CONCISE  = "concise"
    BALANCED = "balanced"
    DETAILED = "detailed"


TONE_INSTRUCTIONS = {
    Tone.PROFESSIONAL: "Adopte un ton professionnel, précis et courtois. Vouvoie le client.",
    Tone.FRIENDLY:     "Adopte un ton chaleureux et bienveillant, comme un conseiller de boutique.",
    Tone.ENTHUSIASTIC: "Adopte un ton enthousiaste et dynamique, sans en faire trop.",
    Tone.CASUAL:       "Adopte un ton décontracté et simple, tu peux tutoyer le client.",
}

# (max_tokens, max_words)
LENGTH_SETTINGS = {
    ResponseLength.CONCISE:  (150, 80),
    ResponseLength.BALANCED: (250, 150),
    ResponseLength.DETAILED: (400, 250),
}

LANGUAGE_NAMES = {
    "fr": "français",
    "en": "anglais",
    "es": "espagnol",
    "de": "allemand",
    "it": "italien",
}


@dataclass(frozen=True)
class AssistantConfig:
    """Persona settings for every generated reply."""
    tone: Tone = Tone.FRIENDLY
    response_length: ResponseLength = ResponseLength.BALANCED
    language: str = "fr"
    assistant_name: str = "OmnIA"

    @property
    def max_tokens(self) -> int:
        return LENGTH_SETTINGS[self.response_length][0]

    @property
    def max_words(self) -> int:
        return LENGTH_SETTINGS[self.response_length][1]

    @property
    def language_name(self) -> str:
        return LANGUAGE_NAMES.get(self.language, self.language)

    @property
    def instructions(self) -> str:
        return (
            f"{TONE_INSTRUCTIONS[self.tone]} "
            f"Réponds en {self.language_name}, en {self.max_words} mots maximum."
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssistantConfig":
        """Build from loose settings, e.g. {"tone": "casual", "responseLength": "concise"}.

        Raises ValueError on an unknown tone or length.
        """
        data = data or {}
        length = data.get("response_length") or data.get("responseLength") or cls.response_length.value
        return cls(
            tone=Tone(data.get("tone") or cls.tone.value),
            response_length=ResponseLength(length),
            language=data.get("language") or cls.language,
            assistant_name=data.get("assistant_name") or data.get("assistantName") or cls.assistant_name,
        )


def load_assistant_config() -> AssistantConfig:
    """Persona from the environment (ASSISTANT_TONE, ASSISTANT_RESPONSE_LENGTH, ...)."""
    return AssistantConfig.from_dict({
        "tone": ASSISTANT_TONE,
        "response_length": ASSISTANT_RESPONSE_LENGTH,
        "language": ASSISTANT_LANGUAGE,
        "assistant_name": ASSISTANT_NAME,
    })
