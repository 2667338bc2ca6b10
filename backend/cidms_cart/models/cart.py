from typing import List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CartLine(BaseModel):
    """One product's presence in the cart."""
    product_id: str
    name: str
    unit_price: float = Field(ge=0, allow_inf_nan=False)
    image_ref: Optional[str] = None
    quantity: int = Field(ge=1)
    available_stock: int = Field(ge=0)  # Stock snapshot taken when the line was added

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        json_schema_extra = {
            "example": {
                "productId": "P1",
                "name": "Widget",
                "unitPrice": 10.0,
                "imageRef": "https://example.com/widget.jpg",
                "quantity": 2,
                "availableStock": 5
            }
        }


class CartItemCandidate(BaseModel):
    """Product selection handed to the cart by a product source."""
    product_id: str
    name: str
    unit_price: float = Field(ge=0, allow_inf_nan=False)
    image_ref: Optional[str] = None
    quantity: int = 1
    available_stock: int

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class CartState(BaseModel):
    """Serializable cart snapshot, as persisted between sessions."""
    items: List[CartLine] = Field(default_factory=list)
    total_items: int = 0
    total_amount: float = 0.0

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class CartMutationResult(BaseModel):
    """Outcome of a quantity-changing cart operation."""
    index: Optional[int] = None  # None when no line was added
    quantity: int
    requested: int
    clamped: bool = False
