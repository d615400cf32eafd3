"""
Player store backends
"""
