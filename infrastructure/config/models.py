"""Configuration models (Pydantic classes)."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from domain.evaluation.sampling import MAX_ROUNDS, SamplingMethod
from infrastructure.constants import OUTPUT_ROOT


class DataColumnsConfig(BaseModel):
    """Column mapping for the scored reference set."""

    truth_col: str = Field(..., description="Boolean (or 0/1) ground-truth column.")
    score_cols: list[str] = Field(..., min_length=1, description="One score column per classifier.")
    names: list[str] | None = Field(
        default=None,
        description="Display names, one per score column. Defaults to the column names.",
    )
    high: bool | list[bool] = Field(
        default=True,
        description="Whether larger scores mean 'more positive': one flag for all, or one per score column.",
    )

    @property
    def resolved_names(self) -> list[str]:
        return list(self.names) if self.names is not None else list(self.score_cols)

    @property
    def resolved_high(self) -> list[bool]:
        if isinstance(self.high, bool):
            return [self.high] * len(self.score_cols)
        return list(self.high)


class CurveConfig(BaseModel):
    """How precision curves are configured for AUPRC, recall-at-precision and threshold ranges."""

    monotonized: bool = True
    balanced: bool = False
    precision_cutoff: float = Field(default=0.9, ge=0.0, le=1.0)


class StatsConfig(BaseModel):
    """
    Configuration for resampling and significance statistics.

    Defaults match the original analysis behavior.
    """

    seed: int | None = 42
    n_samples: int = Field(default=1000, gt=0)
    sampling: SamplingMethod = SamplingMethod.ACCURATE
    monotonized_sampling: bool = False
    n_bins: int = Field(default=50, gt=0)
    ci_probs: tuple[float, float] = (0.025, 0.975)
    signif_res: float = Field(default=0.001, gt=0.0, lt=0.5)
    null_cycles: int = Field(default=10000, gt=0)
    max_rejection_rounds: int = Field(default=MAX_ROUNDS, gt=0)

    @model_validator(mode="after")
    def _validate(self) -> "StatsConfig":
        lo, hi = self.ci_probs
        if not 0.0 <= lo < hi <= 1.0:
            raise ValueError(f"ci_probs must satisfy 0 <= lower < upper <= 1, got {self.ci_probs}")
        return self


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from analysis.yaml
    - Validated and resolved by the configuration loader
    - Consumed by the analysis workflows and the CLI
    """

    data_file_path: Path = Field(..., description="Path to the scored reference set (CSV or Excel).")
    columns: DataColumnsConfig
    curve: CurveConfig = Field(default_factory=CurveConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)

    # Optional (expensive) analyses
    compute_confidence_bands: bool = Field(default=True, description="Sample PRC paths and derive confidence bands.")
    compute_significance: bool = Field(default=True, description="Pairwise AUPRC LLR / p-values.")
    compute_pvrandom: bool = Field(default=False, description="Empirical AUPRC p-values against random scores.")
    compute_sampled_auprc: bool = Field(
        default=False,
        description="Sampling-based AUPRC intervals from the same path sampler as the bands.",
    )

    output_root: Path = Field(default_factory=lambda: OUTPUT_ROOT)

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        n_scores = len(self.columns.score_cols)

        if self.columns.names is not None and len(self.columns.names) != n_scores:
            raise ValueError(
                f"columns.names has {len(self.columns.names)} entries but there are {n_scores} score columns"
            )
        if isinstance(self.columns.high, list) and len(self.columns.high) not in (1, n_scores):
            raise ValueError(
                f"columns.high has {len(self.columns.high)} entries but there are {n_scores} score columns"
            )
        if len(set(self.columns.resolved_names)) != n_scores:
            raise ValueError(f"Classifier names must be unique, got {self.columns.resolved_names}")
        if self.columns.truth_col in self.columns.score_cols:
            raise ValueError(f"truth_col '{self.columns.truth_col}' cannot also be a score column")

        return self
