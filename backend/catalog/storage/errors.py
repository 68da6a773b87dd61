"""Typed failures raised by product stores."""


class StoreError(Exception):
    """Base class for every failure a product store reports."""


class NotFoundError(StoreError):
    """No product exists with the requested id."""

    def __init__(self, product_id: int):
        super().__init__(f"product with id {product_id} not found")
        self.product_id = product_id


class ConflictError(StoreError):
    """The conditional update matched no row.

    Either the requested quantity change would leave the stored quantity
    below zero, or the id no longer exists.
    """

    def __init__(self, product_id: int, delta: int):
        super().__init__(
            f"update of product {product_id} rejected: "
            f"insufficient inventory for quantity change {delta:+d}"
        )
        self.product_id = product_id
        self.delta = delta


class WriteError(StoreError):
    """The backing store refused to commit a write."""


class InvariantError(StoreError):
    """An id-keyed write touched more than one row."""

    def __init__(self, product_id: int, rows_affected: int):
        super().__init__(
            f"write keyed on product {product_id} affected {rows_affected} rows"
        )
        self.product_id = product_id
        self.rows_affected = rows_affected
