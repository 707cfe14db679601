"""Domain layer — entity models, enums, ID rules and the status lifecycle.

Pure data and rules: pydantic and the stdlib only.
"""
