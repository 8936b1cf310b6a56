"""initguard - static checks for upgradeable proxy deployment scripts."""

__version__ = "0.1.0"
