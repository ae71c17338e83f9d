"""
Boundary layer: adapters to the metadata store and the blob filesystem.
"""
