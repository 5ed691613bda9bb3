"""
Loading of `.env` files into the process environment.

The binder never reads files itself; this package populates the lookup
source it reads from.
"""
