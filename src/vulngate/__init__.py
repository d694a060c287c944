"""vulngate - build-time vulnerability gate for Maven projects."""

__version__ = "0.1.0"
