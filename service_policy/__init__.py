"""
Policy builtins services.
"""
