from .wheel_widget import WheelViewWidget

__all__ = ["WheelViewWidget"]
