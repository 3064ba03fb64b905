"""
Command line interface for clt.
"""
