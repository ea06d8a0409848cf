"""
GitHub SBOM Analyzer

Fetches GitHub repository metadata, simulates SBOM generation by two
scanners and compares the dependency sets they report.
"""

__version__ = "0.1.0"
__author__ = "SBOM Analyzer Team"
__description__ = "Simulated SBOM generation and scanner comparison for GitHub repositories"
