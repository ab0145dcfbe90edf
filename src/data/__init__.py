"""
Data Module
---------
Bundled parks dataset used by the file repository and for seeding.
"""
