"""Pydantic models for classifier curves and the results derived from them."""

import math
from typing import Any

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

# Sweep table column names, in table order
THRESH_COL = "thresh"
TP_COL = "tp"
TN_COL = "tn"
FP_COL = "fp"
FN_COL = "fn"
PRECISION_COL = "ppv_prec"
RECALL_COL = "tpr_sens"
FALLOUT_COL = "fpr_fall"

SWEEP_COLUMNS = [THRESH_COL, TP_COL, TN_COL, FP_COL, FN_COL, PRECISION_COL, RECALL_COL, FALLOUT_COL]


class ClassifierCurve(BaseModel):
    """Sweep table of one classifier, together with the orientation its scores were read in."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Display name of the classifier.")
    high: bool = Field(
        default=True,
        description="True if larger raw scores mean 'more positive'. "
        "When False, thresholds in the table are sign-flipped relative to the raw scores.",
    )
    table: pd.DataFrame = Field(..., description="Sweep table, one row per threshold, ascending.")

    @property
    def n_positive(self) -> int:
        return int(self.table[TP_COL].iloc[0] + self.table[FN_COL].iloc[0])

    @property
    def n_negative(self) -> int:
        return int(self.table[FP_COL].iloc[0] + self.table[TN_COL].iloc[0])


class ClassifierCollection(BaseModel):
    """Named, ordered mapping of classifier name -> curve; the unit of comparison."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    curves: dict[str, ClassifierCurve] = Field(default_factory=dict)
    reference_set_size: int = Field(..., ge=0, description="Number of ground-truth labels.")

    @property
    def names(self) -> list[str]:
        return list(self.curves.keys())

    def __len__(self) -> int:
        return len(self.curves)

    def __contains__(self, name: object) -> bool:
        return name in self.curves

    def __getitem__(self, name: str) -> ClassifierCurve:
        return self.curves[name]

    def items(self):
        return self.curves.items()

    def describe(self) -> str:
        """Short human-readable description of the collection."""
        return "\n".join(
            [
                "Classifier collection",
                f"Reference set size: {self.reference_set_size}",
                f"Predictors: {', '.join(self.names)}",
            ]
        )


class PathEnsemble(BaseModel):
    """N independently sampled precision/recall paths of one classifier."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    precision: np.ndarray  # (n_draws, n_rows)
    recall: np.ndarray  # (n_draws, n_rows)

    @property
    def n_draws(self) -> int:
        return int(self.precision.shape[0])

    @property
    def n_rows(self) -> int:
        return int(self.precision.shape[1])

    def pooled(self) -> pd.DataFrame:
        """All (recall, precision) points of all draws as one unordered table, missing points dropped."""
        df = pd.DataFrame(
            {
                "recall": self.recall.ravel(),
                "precision": self.precision.ravel(),
            }
        )
        return df.dropna().reset_index(drop=True)


class ThresholdRange(BaseModel):
    """
    Score interval in which configured precision first exceeds a cutoff.

    Both values are in the original (un-flipped) score scale. `previous_thresh` is the
    threshold of the row just before the cutoff is reached (-inf, or +inf for low-to-high
    scores, when the very first row already exceeds it); `cutoff_thresh` is the threshold
    of the first row exceeding it.
    """

    previous_thresh: float
    cutoff_thresh: float


class SignificanceResult(BaseModel):
    """AUPRC comparison bundle: empirical AUPRC, 95% CI, pairwise LLR and p-value matrices."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    auprc: pd.Series
    ci: pd.DataFrame  # rows: lower/upper probability, columns: classifiers
    llr: pd.DataFrame  # rows/cols: classifiers, NaN diagonal
    pval: pd.DataFrame  # rows/cols: classifiers, NaN diagonal

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (NaN/inf become None)."""

        def _clean(value: float) -> float | None:
            return float(value) if math.isfinite(value) else None

        def _matrix(df: pd.DataFrame) -> dict[str, dict[str, float | None]]:
            return {str(r): {str(c): _clean(df.loc[r, c]) for c in df.columns} for r in df.index}

        return {
            "auprc": {str(k): _clean(v) for k, v in self.auprc.items()},
            "ci": _matrix(self.ci.T),
            "llr": _matrix(self.llr),
            "pval": _matrix(self.pval),
        }
