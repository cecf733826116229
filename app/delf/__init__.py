"""delf - find and delete files and folders by pattern, safely."""

__version__ = "2.0.0"
