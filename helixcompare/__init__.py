"""
HelixCompare: telecom offer extraction (page text → canonical rows → CSV / record store).
"""

__version__ = "0.3.0"
