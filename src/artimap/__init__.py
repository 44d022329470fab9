"""
artimap - artifact coordinate mapping and package staging

artimap rewrites build-time artifact coordinates into the coordinates
provided by a system packaging layout, and stages build outputs into an
installable package tree together with the mapping metadata that lets
later builds resolve them.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
