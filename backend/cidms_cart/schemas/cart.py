from typing import List, Optional
from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    """Schema for adding a product selection to the cart."""
    product_id: str
    name: str
    unit_price: float = Field(ge=0, allow_inf_nan=False)
    image_ref: Optional[str] = None
    quantity: int = 1
    available_stock: int = Field(ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": "P1",
                "name": "Widget",
                "unit_price": 10.0,
                "image_ref": "https://example.com/widget.jpg",
                "quantity": 1,
                "available_stock": 5
            }
        }


class UpdateCartItemRequest(BaseModel):
    """Schema for updating cart line quantity. Out-of-range values are clamped."""
    quantity: int

    class Config:
        json_schema_extra = {
            "example": {
                "quantity": 3
            }
        }


class CartItemResponse(BaseModel):
    """Schema for cart line response."""
    index: int
    product_id: str
    name: str
    unit_price: float
    image_ref: Optional[str] = None
    quantity: int
    available_stock: int
    subtotal: float


class CartResponse(BaseModel):
    """Schema for cart response."""
    items: List[CartItemResponse]
    total_items: int
    total_amount: float
    formatted_total: str


class CartMutationResponse(BaseModel):
    """Schema for a quantity-changing operation: the cart plus what was applied."""
    cart: CartResponse
    index: Optional[int] = None
    quantity: int
    requested: int
    clamped: bool


class DeliveryAddress(BaseModel):
    """Delivery address collected at checkout."""
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)
    country: str = ""

    class Config:
        str_strip_whitespace = True


class CheckoutRequest(BaseModel):
    """Schema for placing an order from the cart."""
    customer_id: str
    delivery_address: DeliveryAddress
    payment_method: str = "cash"
    notes: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust123",
                "delivery_address": {
                    "street": "12 Harbour Road",
                    "city": "Springfield",
                    "state": "IL",
                    "zip": "62701",
                    "country": "USA"
                },
                "payment_method": "cash",
                "notes": "Leave at the front desk"
            }
        }


class CheckoutResponse(BaseModel):
    """Schema for checkout response."""
    order_id: Optional[str] = None
    cart: CartResponse
