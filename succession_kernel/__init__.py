"""
Succession Kernel

Pure core of the statutory succession calculator:
- Exact rational share arithmetic
- Heir forest model with right-of-representation chains
- Typed errors and structured logging shared by every layer
"""

__version__ = "0.1.0"
