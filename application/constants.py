"""Application-level constants."""

# Keys for serialized metrics
REFERENCE_SET_SIZE_KEY = "reference_set_size"
CLASSIFIERS_KEY = "classifiers"
AUROC_KEY = "auroc"
AUPRC_KEY = "auprc"
RECALL_AT_PRECISION_KEY = "recall_at_precision"
PRECISION_CUTOFF_KEY = "precision_cutoff"
THRESHOLD_RANGES_KEY = "threshold_ranges"
SIGNIFICANCE_KEY = "significance"
PVRANDOM_KEY = "pvrandom"
SAMPLED_AUPRC_CI_KEY = "sampled_auprc_ci"

# Output filenames
METRICS_FILENAME = "metrics.json"
SIGNIFICANCE_FILENAME = "significance.json"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"
SWEEP_FILENAME_TEMPLATE = "sweep_{name}.csv"
BAND_FILENAME_TEMPLATE = "prc_band_{name}.csv"

# Output directory structure
SWEEP_OUTPUTS_DIRNAME = "sweeps"
BAND_OUTPUTS_DIRNAME = "bands"
LOG_FILENAME = "run.log"
