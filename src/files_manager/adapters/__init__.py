"""
Adapter layer for files-manager.

Contains the session cache (in-process/Redis), local blob storage and the
in-process task queue used by the request handlers.
"""
