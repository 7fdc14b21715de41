"""HTTP routers; each one is a thin layer over the task queue and services."""
