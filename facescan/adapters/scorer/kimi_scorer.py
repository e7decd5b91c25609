"""
KIMI (Moonshot AI) face scorer.
Uses KIMI's OpenAI-compatible API with multimodal support.
Requires KIMI_API_KEY in .env; KIMI_MODEL overrides the vision model.
"""
import os

import httpx

from facescan.adapters.scorer.base import ScorerAdapter
from facescan.adapters.scorer.prompts import CONFIRM_PROMPT, SCORE_PROMPT, parse_score, parse_yes_no
from facescan.orchestrator.errors import ScorerError

KIMI_API_URL = "https://api.moonshot.cn/v1/chat/completions"
KIMI_MODEL   = os.getenv("KIMI_MODEL", "moonshot-v1-8k-vision-preview")


class KimiScorer(ScorerAdapter):
    def __init__(self, status_store, client: httpx.Client | None = None, api_key: str | None = None):
        self.status = status_store
        self._api_key = api_key or os.getenv("KIMI_API_KEY")
        self._client = client or httpx.Client(timeout=30.0)
        self.ready = bool(self._api_key)
        if self.ready:
            self.status.log(f"kimi_scorer: ready (model={KIMI_MODEL})")
        else:
            self.status.log("kimi_scorer: KIMI_API_KEY not set, every comparison will fail", level="warning")

    def score(self, probe: str, reference: str) -> float:
        raw = self._ask(probe, reference, SCORE_PROMPT, max_tokens=8)
        score = parse_score(raw)
        self.status.log(f"kimi_scorer: score raw='{raw}' -> {score:.0f}")
        return score

    def confirm(self, probe: str, reference: str) -> bool:
        raw = self._ask(probe, reference, CONFIRM_PROMPT, max_tokens=4)
        verdict = parse_yes_no(raw)
        self.status.log(f"kimi_scorer: confirm raw='{raw}' -> {verdict}")
        return verdict

    def _ask(self, probe: str, reference: str, prompt: str, max_tokens: int) -> str:
        if not self.ready:
            raise ScorerError("kimi_scorer not configured")

        payload = {
            "model": KIMI_MODEL,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": probe, "detail": "auto"}},
                        {"type": "image_url", "image_url": {"url": reference, "detail": "auto"}},
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
            "max_tokens": max_tokens,
            "temperature": 0,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = self._client.post(KIMI_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ScorerError(f"transport error: {e}") from e
        if not resp.is_success:
            raise ScorerError(f"HTTP {resp.status_code}: {resp.text[:300]}")
        try:
            return resp.json()["choices"][0]["message"]["content"].strip().lower()
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ScorerError(f"unexpected response body: {e}") from e
