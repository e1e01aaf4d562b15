"""HTTP API: root router, health endpoints and shared dependencies.

The root router lives in ``remiwire.api.router``; it is not imported here
because module repositories import ``remiwire.api.dependencies``.
"""
