"""Service layer — operations over a SessionStore, each returning a ServiceResult.

Services read and write session state through the store and announce
what happened to plugins. They never import commands or output.
"""
