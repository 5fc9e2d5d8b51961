"""petstore/ -- Pet catalogue domain: dataclasses, repository and demo seed.

Layer rule: petstore/ does not import from api/. The seed module is the only
place that reaches into auth/, to create the demo login accounts.
"""
