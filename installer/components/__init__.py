"""
Component modules for the machine configurator.

Every module in this package registers its component with the
ComponentRegistry when imported.
"""
