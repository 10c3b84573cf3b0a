"""dockhand CLI — endpoint list and edit views on top of the endpoint API."""

__version__ = "1.0.0"
