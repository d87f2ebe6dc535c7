"""
CaX car wash admin: a server-rendered back office over the car wash REST API.
"""
__version__ = "1.0.0"
