from pathlib import Path

# Repo-root conventional directories/files (overrideable via analysis.yaml)
CONFIG_DIR = Path("configs")
ANALYSIS_FILE = CONFIG_DIR / "analysis.yaml"

DATA_DIR = Path("dataset")
OUTPUT_ROOT = Path("outputs")
