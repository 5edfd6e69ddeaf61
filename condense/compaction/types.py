"""Types for compaction results."""

from pydantic import BaseModel, ConfigDict

from ..types.types import Usage


class SummarizationResult(BaseModel):
    """Result of one successful summarization attempt.

    An empty ``summary_text`` is still a successful result; ``is_empty`` tells it
    apart, since it usually points at a model or prompt defect upstream.
    """

    model_config = ConfigDict(frozen=True)

    boundary_round_id: str
    summary_text: str
    model: str | None = None
    usage: Usage | None = None
    token_count: int | None = None
    elapsed_ms: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.summary_text == ""
