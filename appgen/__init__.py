"""appgen -- scaffold full-stack JavaScript projects from a JSON specification."""

__version__ = "0.1.0"
