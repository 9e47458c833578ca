"""
Roastify: backend de gestion para freelancers (timer y mirror de bases).
"""
__version__ = "1.0.0"
