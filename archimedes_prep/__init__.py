# archimedes_prep/__init__.py
"""
Archimedes Prep - exam preparation backend
Timed mock tests, AI-generated question sets, a learning center and progress reports
"""

__version__ = "1.0.0"
__description__ = "Archimedes Awards preparation API with AI-powered mock tests"

# Core module exports
from .core.config import config
from .main import app

__all__ = ["app", "config"]
