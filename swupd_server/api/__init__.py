"""ASGI handler chain and the metrics sidecar."""
