"""Local expense report editor: CRUD, filtering, dashboards and projection."""

__version__ = "0.1.0"
