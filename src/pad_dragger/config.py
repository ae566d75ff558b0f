from typing import Literal, Optional

from pydantic import BaseModel, Field

from pad_dragger.algorithm.scoring import DEFAULT_THRESHOLD, SCORERS, CallableScorer, Scorer
from pad_dragger.utils import load_score_fn


class AnalysisConfig(BaseModel):
    threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0.0, le=1.0)
    scorer: Literal["textual", "printable"] = "textual"
    scorer_plugin: Optional[str] = None
    max_workers: Optional[int] = Field(default=None, ge=1)
    show_all: bool = False

    def build_scorer(self) -> Scorer:
        """A plugin file, when given, wins over the named scorer."""
        if self.scorer_plugin:
            return CallableScorer(load_score_fn(self.scorer_plugin), threshold=self.threshold)
        return SCORERS[self.scorer](threshold=self.threshold)
