"""Small helpers shared by the protocol layer."""

from .bcc import bcc
