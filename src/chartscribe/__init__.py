"""
ChartScribe: clinical documentation backend

Turns dictated encounter transcripts into structured physician notes,
reveals them field by field, and runs a Clinical Documentation
Improvement (CDI) review pass over saved charts.
"""

__version__ = "0.1.0"
__author__ = "ChartScribe Team"
__description__ = "Transcript-to-chart and CDI review backend"
