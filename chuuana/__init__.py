"""Mid-tier place-bet picker for pasted JRA race cards."""

__version__ = "0.3.0"
