"""
Excel Sales Analyzer
====================
Pick a sales workbook, run the analysis job, watch progress, save the report.
"""

__version__ = "0.1.0"
