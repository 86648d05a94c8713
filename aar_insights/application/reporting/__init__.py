"""Reporting helpers: number formatting and text rendering."""
