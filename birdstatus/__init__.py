"""birdstatus: live routing protocol status for the BIRD daemon."""

__version__ = "0.1.0"
