"""
Dental AI - Photo-based dental health analysis pipeline.
"""
from .config import PipelineConfig, log_settings
from .utils import setup_logging

__version__ = "1.0.0"

# Stage budgets are validated when a PipelineConfig is built, not at import
setup_logging(*log_settings())

__all__ = ["PipelineConfig", "__version__"]
