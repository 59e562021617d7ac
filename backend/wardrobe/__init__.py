"""
Wardrobe ingestion backend.
"""
