"""Community complaint logger and open-issue trend analyzer."""

__version__ = "0.1.0"
