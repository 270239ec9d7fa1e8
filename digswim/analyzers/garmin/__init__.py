"""Garmin Connect response analyzers.

Pure functions over raw HTML/JSON pulled from Garmin Connect: token scraping,
activity-list mapping and split/length reshaping. No network access here.
"""
