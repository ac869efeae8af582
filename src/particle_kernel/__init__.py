"""Point-mass particle kernel with gravity and pairwise overlap resolution."""

__version__ = "0.1.0"
