"""Claude-backed text generation: example sentences and reading stories."""

from __future__ import annotations

import logging
import random
import re
from typing import Optional, Sequence

from vocabtutor.config.settings import Settings
from vocabtutor.engine.story import StoryResult, clean_markdown, select_story_words

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"^\d+[.)]\s*")


class GenerationError(Exception):
    """The text provider could not produce a usable answer."""


class TextGenerator:
    """Thin wrapper over the Anthropic client. One request, no retry."""

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or Settings.load()
        self._client = client

    def _get_client(self):
        if self._client is None:
            api_key = self.settings.claude.get_api_key()
            if api_key:
                import anthropic
                self._client = anthropic.Anthropic(api_key=api_key)
        return self._client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.settings.claude.get_api_key())

    def complete(self, prompt: str, max_tokens: int = 1024, temperature: float = 0.7) -> str:
        client = self._get_client()
        if client is None:
            raise GenerationError("Claude API not configured. Set ANTHROPIC_API_KEY to enable generation.")

        try:
            response = client.messages.create(
                model=self.settings.claude.get_model(),
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error("Generation request failed: %s", e)
            raise GenerationError(f"Generation failed: {e}") from e

        text = ""
        if response.content:
            text = (getattr(response.content[0], "text", "") or "").strip()
        if not text:
            raise GenerationError("No response from the model")
        return text


def parse_numbered_sentences(text: str) -> list[str]:
    """Turn "1. ...\\n2) ..." output into a list of bare sentences."""
    sentences = []
    for line in text.split("\n"):
        line = _NUMBER_PREFIX.sub("", line.strip()).strip()
        if line:
            sentences.append(line)
    return sentences


def examples_prompt(portuguese: str, french: str, count: int = 4) -> str:
    return f"""Generate {count} different example sentences in Portuguese using the word or expression "{portuguese}" (which means "{french}" in French).

Requirements:
- Each sentence should be simple and useful for a language learner
- Use everyday vocabulary
- Make each sentence unique and different from the others
- Return ONLY the Portuguese sentences, one per line, numbered 1-{count}
- Do not include translations or explanations
- Format:
1. [sentence]
2. [sentence]
..."""


def story_prompt(word_list: str) -> str:
    return f"""Write a short story in Portuguese (around 4000 characters) that incorporates the following vocabulary words naturally:

{word_list}

Requirements:
- Write ONLY in Portuguese
- The story should be simple enough for a language learner (B1-B2 level)
- Use everyday situations and simple sentence structures
- You can use other common Portuguese words to make the story flow naturally
- Make the story engaging and interesting (daily life, a trip, a meeting, etc.)
- Do NOT include any translations or explanations
- Do NOT include a title, just start directly with the story
- Use paragraph breaks to make it readable
- Do NOT use any markdown formatting (no bold, no italics, no asterisks)"""


def generate_examples(
    generator: TextGenerator, portuguese: str, french: str, count: int = 4,
) -> list[str]:
    """Ask for ``count`` example sentences using a word."""
    text = generator.complete(
        examples_prompt(portuguese, french, count), max_tokens=500, temperature=0.7,
    )
    return parse_numbered_sentences(text)


def generate_story(
    generator: TextGenerator, words: Sequence, rng: Optional[random.Random] = None,
) -> StoryResult:
    """Write a story around a random subset of ``words``."""
    used = select_story_words(words, rng=rng)
    word_list = ", ".join(f"{w.portuguese} ({w.french})" for w in used)

    text = generator.complete(story_prompt(word_list), max_tokens=2000, temperature=0.8)
    logger.info("Generated story of %d characters from %d words", len(text), len(used))
    return StoryResult(story=clean_markdown(text), used_words=used)
