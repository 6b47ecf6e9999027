"""JackeMate: citizen reporting of urban infrastructure problems."""

__version__ = "0.1.0"
