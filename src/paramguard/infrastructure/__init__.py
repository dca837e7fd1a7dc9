"""Infrastructure layer: request value sources and Starlette middleware.

This layer turns HTTP input into the value sources the domain normalizer
expects, and publishes validation outputs back on the request.
"""
