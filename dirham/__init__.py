"""
dirham: bank statement PDFs to normalized transactions.
"""
__version__ = "0.1.0"
