"""
Pole map viewer test suite

Structure:
- unit/: parsing, query service, client loader and compatibility shim
- integration/: HTTP API against a seeded SQLite database
"""
