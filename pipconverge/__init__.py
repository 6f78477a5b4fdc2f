"""pipconverge — reconcile declared Python packages against an environment via pip."""

__version__ = "0.1.0"
