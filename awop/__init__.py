"""Academic Wheel of Privilege: an interactive PyQt5 wheel of identity axes."""

__version__ = "0.1.0"
