"""auth/ -- Authentication package for the pet store.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or petstore/.
api/ imports from auth/, not the other way around.
"""
