"""Infrastructure layer — session state container, identity slot, demo data.

Plugins are loaded here on request, but commands and output are never
imported.
"""
