"""Control NEC displays over the LAN PD/LCD control protocol."""

__version__ = "0.1.0"
