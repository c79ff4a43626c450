"""notebrowser: a desktop note editor that browses notes like web pages."""

__version__ = "0.1.0"
