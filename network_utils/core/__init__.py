# network_utils/core/__init__.py

"""
Configuration, logging setup, exceptions and small helpers shared by the package.
"""
