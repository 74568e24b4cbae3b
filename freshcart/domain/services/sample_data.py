# Built-in catalog used when the catalog source is empty, plus the demo interactions.
from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.models.product import Product

SAMPLE_PRODUCTS = (
    Product(
        product_id=1, name="Fresh Apples", category="Fruits", price=3.99,
        image_url="https://images.unsplash.com/photo-1560806887-1e4cd0b6cbd6?w=400",
        description="Fresh red apples", seller="Green Farm", location="Nairobi",
        unit="kg", quantity="5 kg", harvest_date="2024-01-15", rating=4.5,
    ),
    Product(
        product_id=2, name="Organic Bananas", category="Fruits", price=2.49,
        image_url="https://images.unsplash.com/photo-1571771894821-ce9b6c11b08e?w=400",
        description="Organic yellow bananas", seller="Organic Valley", location="Kisumu",
        unit="bunch", quantity="3 bunches", harvest_date="2024-01-20", rating=4.2,
    ),
    Product(
        product_id=3, name="Fresh Spinach", category="Vegetables", price=1.99,
        image_url="https://images.unsplash.com/photo-1576045057995-568f588f82fb?w=400",
        description="Fresh green spinach", seller="Local Farm", location="Nakuru",
        unit="bunch", quantity="2 bunches", harvest_date="2024-01-18", rating=4.0,
    ),
    Product(
        product_id=4, name="Whole Milk", category="Dairy", price=4.29,
        image_url="https://images.unsplash.com/photo-1550583724-b2692b85b150?w=400",
        description="Fresh whole milk", seller="Dairy Co", location="Eldoret",
        unit="liter", quantity="2 liters", harvest_date="2024-01-22", rating=4.8,
    ),
    Product(
        product_id=5, name="Chicken Breast", category="Meat", price=8.99,
        image_url="https://images.unsplash.com/photo-1604503468506-a8da13d82791?w=400",
        description="Fresh chicken breast", seller="Poultry Farm", location="Kiambu",
        unit="kg", quantity="1 kg", harvest_date="2024-01-21", rating=4.6,
    ),
)

# (action, index into SAMPLE_PRODUCTS): four views, two cart adds, one purchase
SAMPLE_INTERACTIONS = (
    (ActionKind.VIEW, 0),
    (ActionKind.VIEW, 2),
    (ActionKind.VIEW, 3),
    (ActionKind.VIEW, 1),
    (ActionKind.ADD_TO_CART, 0),
    (ActionKind.ADD_TO_CART, 3),
    (ActionKind.PURCHASE, 2),
)
