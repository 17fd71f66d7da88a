"""Infrastructure layer: session persistence and workspace wiring.

The service layer bridges between domain models and this layer.
"""
