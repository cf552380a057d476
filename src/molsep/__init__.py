"""
Barcode Molecule Separation

Splits each barcode of a linked-read barcode overlap graph into the distinct
molecules it tags, using biconnected components of the barcode neighbourhood.
"""

__version__ = "1.0.0"
__author__ = "molsep developers"
