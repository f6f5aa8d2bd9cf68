"""
Catalog engine services.

Import from the submodules directly (``services.merge``, ``services.importer``
...); models import ``services.price_matrix`` so this package stays empty.
"""
