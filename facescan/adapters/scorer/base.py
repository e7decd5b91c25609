class ScorerAdapter:
    ready: bool = True

    def score(self, probe: str, reference: str) -> float:
        """Confidence 0-100 that both images show the same person.

        Raises ScorerError on any failure; the match policy absorbs it.
        """
        raise NotImplementedError

    def confirm(self, probe: str, reference: str) -> bool:
        """Stricter yes/no check used once, on the best candidate."""
        raise NotImplementedError
