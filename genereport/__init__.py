"""genereport: plain-language translation of genetic test reports"""

__version__ = "0.1.0"
