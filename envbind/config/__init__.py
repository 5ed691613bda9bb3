"""
Settings helpers for dataclasses that load themselves from the environment.
"""
