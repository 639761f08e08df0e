"""
ThreatLens Data Models Package

Pydantic models for data validation and serialization.
"""

from .prediction import *
from .dataset import *
