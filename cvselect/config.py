import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import numpy as np

DATA_URL = (
    "https://archive.ics.uci.edu/ml/machine-learning-databases/"
    "breast-cancer-wisconsin/breast-cancer-wisconsin.data"
)


def setup_logging(log_dir="logs", level=logging.INFO):
    """Setup logging configuration"""
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"cvselect_{timestamp}.log"

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
    return logging.getLogger("cvselect")


@dataclass
class Settings:
    seed: int = 1234
    n_folds: int = 10
    data_source: str = DATA_URL
    standardize: bool = True
    lambdas: np.ndarray = field(default_factory=lambda: np.logspace(-4, 0, 30))
    measure: str = "deviance"
    n_jobs: int = 1
    on_error: str = "raise"
    log_dir: str = "logs"

    def validate(self):
        if self.n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {self.n_folds}")
        if np.any(np.asarray(self.lambdas) <= 0):
            raise ValueError("lambdas must be positive")
        if self.measure not in ("deviance", "class"):
            raise ValueError(f"Unknown measure '{self.measure}'")
        if self.on_error not in ("raise", "skip"):
            raise ValueError(f"on_error must be 'raise' or 'skip', got '{self.on_error}'")
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")
        return self
