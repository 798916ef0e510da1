"""
English auction application
"""
