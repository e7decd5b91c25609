from facescan.adapters.scorer.base import ScorerAdapter


class MockScorer(ScorerAdapter):
    """Deterministic scorer keyed by reference image.

    scores/confirmations map a reference image to a result; a value that is
    an Exception instance is raised instead. Unknown references score
    `default_score` and are not confirmed. Every call is recorded in `calls`
    as ("score" | "confirm", reference).
    """

    def __init__(self, status_store, scores: dict | None = None, confirmations: dict | None = None,
                 default_score: float = 0.0):
        self.status = status_store
        self.scores = dict(scores or {})
        self.confirmations = dict(confirmations or {})
        self.default_score = default_score
        self.calls: list[tuple[str, str]] = []

    def score(self, probe: str, reference: str) -> float:
        self.calls.append(("score", reference))
        result = self.scores.get(reference, self.default_score)
        if isinstance(result, Exception):
            raise result
        self.status.log(f"mock_scorer: score {result:.0f}")
        return float(result)

    def confirm(self, probe: str, reference: str) -> bool:
        self.calls.append(("confirm", reference))
        result = self.confirmations.get(reference, False)
        if isinstance(result, Exception):
            raise result
        self.status.log(f"mock_scorer: confirm {result}")
        return bool(result)

    def scored(self) -> list[str]:
        return [ref for kind, ref in self.calls if kind == "score"]

    def confirmed(self) -> list[str]:
        return [ref for kind, ref in self.calls if kind == "confirm"]
