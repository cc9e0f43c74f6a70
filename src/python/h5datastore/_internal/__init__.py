# h5datastore/_internal/__init__.py
"""Internal building blocks of the datastore. Not part of the public API."""
