"""
Product segmentation and cold-start feature preparation for retail sales forecasting.

Run the whole analysis with:

    python -m product_segmentation
"""

from .config import Config
from .pipeline import run_pipeline

__all__ = ["Config", "run_pipeline"]
