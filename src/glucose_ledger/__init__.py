"""
Glucose Ledger - Meal-tied glucose tracking with spreadsheet import.

Parses glucose readings from Excel/CSV spreadsheets, validates them, and
reconciles them against a hosted record store (Supabase).
"""

__version__ = "0.1.0"
