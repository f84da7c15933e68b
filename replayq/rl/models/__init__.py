"""
Value table and model containers.
"""
