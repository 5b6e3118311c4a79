"""
Council Vote - Collegiate vote resolution engine

Resolves the ballots cast in a judgment session of a tax-litigation
council into a binding decision:

- "follows another member's vote" chains collapse to concrete positions
- abstentions, absences and impediments are recorded but never decide
- plurality ties among substantive outcomes are detected, never guessed
- the presiding member's deciding ballot breaks a tie

The engine is pure: identical inputs always yield identical results.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
