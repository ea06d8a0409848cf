"""
Cross-tool comparison and export components.
"""

from .comparison_engine import ComparisonEngine
from .export_manager import ExportManager, RECOMMENDATIONS

__all__ = [
    "ComparisonEngine",
    "ExportManager",
    "RECOMMENDATIONS"
]
