"""
rail-authz: role-based permission evaluation for Django projects.
"""

__version__ = "0.1.0"
