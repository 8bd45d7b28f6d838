"""What the catalog hands to the cart when a shopper clicks "Add to cart"."""

from protean.fields import Float, String

from ordering.domain import ordering


@ordering.value_object
class CatalogItem:
    """Pricing snapshot of a catalog product.

    Carries no stock figure; the cart always asks inventory for that.
    A missing price or discount stays ``None`` here and prices as 0.
    """

    product_id: String(required=True, max_length=100)
    name: String(required=True, max_length=255)
    unit_price: Float()
    discount_percent: Float()
    image_ref: String(max_length=500)
