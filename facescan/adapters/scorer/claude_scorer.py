"""
Claude face scorer (zero-shot, no enrollment model needed).

Sends the captured photo and one registered photo to Claude via the
Anthropic API and asks either for a 0-100 same-person score or for a
strict yes/no confirmation.

Requires ANTHROPIC_API_KEY in environment (.env or system env).
CLAUDE_MODEL overrides the model.
"""
import os

import anthropic

from facescan.adapters.images import is_url, parse_data_uri
from facescan.adapters.scorer.base import ScorerAdapter
from facescan.adapters.scorer.prompts import CONFIRM_PROMPT, SCORE_PROMPT, parse_score, parse_yes_no
from facescan.orchestrator.errors import InvalidImage, ScorerError

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")


class ClaudeScorer(ScorerAdapter):
    def __init__(self, status_store, client=None, model: str = CLAUDE_MODEL):
        self.status = status_store
        self.model = model
        self._client = client
        self.ready = client is not None
        if client is None:
            self._init_client()

    def _init_client(self):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            self.status.log("claude_scorer: ANTHROPIC_API_KEY not set, every comparison will fail", level="warning")
            return
        self._client = anthropic.Anthropic(api_key=api_key)
        self.ready = True
        self.status.log(f"claude_scorer: ready ({self.model})")

    def score(self, probe: str, reference: str) -> float:
        raw = self._ask(probe, reference, SCORE_PROMPT, max_tokens=8)
        score = parse_score(raw)
        self.status.log(f"claude_scorer: score raw='{raw}' -> {score:.0f}")
        return score

    def confirm(self, probe: str, reference: str) -> bool:
        raw = self._ask(probe, reference, CONFIRM_PROMPT, max_tokens=4)
        verdict = parse_yes_no(raw)
        self.status.log(f"claude_scorer: confirm raw='{raw}' -> {verdict}")
        return verdict

    def _ask(self, probe: str, reference: str, prompt: str, max_tokens: int) -> str:
        if not self.ready or self._client is None:
            raise ScorerError("claude_scorer not configured")
        try:
            content = [
                {"type": "text", "text": "Image 1 (captured photo):"},
                _image_block(probe),
                {"type": "text", "text": "Image 2 (registered photo):"},
                _image_block(reference),
                {"type": "text", "text": prompt},
            ]
        except InvalidImage as e:
            raise ScorerError(f"bad image: {e}") from e

        try:
            message = self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            raise ScorerError(f"API error: {e}") from e

        if not message.content:
            raise ScorerError("empty reply")
        return message.content[0].text.strip().lower()


def _image_block(image: str) -> dict:
    if is_url(image):
        return {"type": "image", "source": {"type": "url", "url": image}}
    mime, _ = parse_data_uri(image)
    b64 = image.split(",", 1)[1]
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": mime, "data": b64},
    }
