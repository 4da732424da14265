"""Default training phrases seeded into every new store."""

from __future__ import annotations

from ..models.datatypes import PhraseInput


DEFAULT_TRAINING_PHRASES: tuple[str, ...] = (
    "The quick brown fox jumps over the lazy dog near the riverbank.",
    "The weather today is absolutely beautiful and perfect for a walk.",
    "Technology continues to advance at an unprecedented rate.",
    "Artificial intelligence is transforming how we communicate.",
    "I enjoy reading books and learning about different cultures.",
    "Communication is the foundation of all human relationships.",
    "Success comes from dedication, hard work, and perseverance.",
    "The ocean waves crash against the rocky shoreline.",
    "Music has the power to bring people together across cultures.",
    "Every challenge presents an opportunity for growth and learning.",
)


def default_phrase_inputs() -> list[PhraseInput]:
    """Return seed phrase inputs in presentation order."""

    return [
        PhraseInput(text=text, category="training", difficulty="medium")
        for text in DEFAULT_TRAINING_PHRASES
    ]
