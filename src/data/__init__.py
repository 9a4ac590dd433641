"""
Price data model, CSV reading, and the default symbol universe.

Loads daily price CSVs into immutable PriceSeries with strict schema
validation and ordering requirements.
"""
