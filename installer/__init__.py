"""
Machine configurator components.

Each component installs and/or configures one part of a Mac that already
has the synced configuration folder.
"""
