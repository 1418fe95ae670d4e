"""DJ Track Manager: tracks, sets and the API that serves them"""

__version__ = "0.1.0"
