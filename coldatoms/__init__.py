"""Entity-component simulation of cold atoms: integration, gravity, collisions and atom sources."""

__version__ = "0.1.0"