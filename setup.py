"""
Build script for safetag. Set SAFETAG_USE_MYPYC=1 to compile the scanner
and recognizer with mypyc (pip install safetag[mypyc]).
"""

import os

from setuptools import setup

# tokens.py stays pure Python: Attributes subclasses an ABC.
MYPYC_MODULES = [
    "src/safetag/scanner.py",
    "src/safetag/tokenizer.py",
]

ext_modules = []
if os.environ.get("SAFETAG_USE_MYPYC", "0") == "1":
    from mypyc.build import mypycify

    ext_modules = mypycify(MYPYC_MODULES, opt_level="3")

setup(ext_modules=ext_modules)
