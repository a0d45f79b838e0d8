"""
Service layer: record store access, collection loading, writes, identity and export.
"""
