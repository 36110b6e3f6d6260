"""
Money Man - Ledger Engine Package

A personal finance ledger: accounts hold named periodic tables
(usually months), tables hold transactions, transactions carry a tag
from a shared vocabulary.

DESIGN PRINCIPLES:
1. The engine never prompts; the caller confirms every creation
2. Fail early, fail visibly
3. No silent corrections of user data
4. Every mutation is auditable
5. Storage layer is swappable
"""

import logging

__version__ = "1.0.0"
__author__ = "Money Man Team"

# Library code never configures output; the host application does.
logging.getLogger(__name__).addHandler(logging.NullHandler())
