from fastapi import APIRouter, Depends, HTTPException, Response, status

from cidms_cart.api.deps import get_cart_store, get_order_client
from cidms_cart.core.exceptions import CartIndexError, CheckoutError, EmptyCartError
from cidms_cart.models.cart import CartMutationResult
from cidms_cart.schemas.cart import (
    AddToCartRequest,
    UpdateCartItemRequest,
    CartItemResponse,
    CartResponse,
    CartMutationResponse,
    CheckoutRequest,
    CheckoutResponse
)
from cidms_cart.services.cart_store import CartStore
from cidms_cart.services.checkout_service import CheckoutService
from cidms_cart.services.order_client import OrderApiClient
from cidms_cart.utils.helpers import format_currency

router = APIRouter()


def _cart_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(
                index=index,
                product_id=line.product_id,
                name=line.name,
                unit_price=line.unit_price,
                image_ref=line.image_ref,
                quantity=line.quantity,
                available_stock=line.available_stock,
                subtotal=line.subtotal
            )
            for index, line in enumerate(store.items)
        ],
        total_items=store.total_items,
        total_amount=store.total_amount,
        formatted_total=format_currency(store.total_amount)
    )


def _mutation_response(store: CartStore, result: CartMutationResult) -> CartMutationResponse:
    return CartMutationResponse(
        cart=_cart_response(store),
        index=result.index,
        quantity=result.quantity,
        requested=result.requested,
        clamped=result.clamped
    )


def _line_not_found(e: CartIndexError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=e.message
    )


@router.get("", response_model=CartResponse)
def get_cart(store: CartStore = Depends(get_cart_store)):
    """
    Get the current session's cart with totals.
    """
    return _cart_response(store)


@router.post("/items", response_model=CartMutationResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    request: AddToCartRequest,
    response: Response,
    store: CartStore = Depends(get_cart_store)
):
    """
    Add a product selection to the cart.

    If the product is already in the cart, quantities are added and clamped
    to the stock recorded when it was first added. The response reports the
    quantity actually applied and whether clamping occurred.

    A new product with no stock is not added; the cart is returned with 200.
    """
    result = store.add_item(request.model_dump())
    if result.index is None:
        response.status_code = status.HTTP_200_OK
    return _mutation_response(store, result)


@router.put("/items/{index}", response_model=CartMutationResponse)
def update_cart_item(
    index: int,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store)
):
    """
    Update the quantity of the cart line at the given position.

    The quantity is clamped between 1 and the line's stock.
    """
    try:
        result = store.update_quantity(index, request.quantity)
    except CartIndexError as e:
        raise _line_not_found(e)

    return _mutation_response(store, result)


@router.delete("/items/{index}", response_model=CartResponse)
def remove_from_cart(
    index: int,
    store: CartStore = Depends(get_cart_store)
):
    """
    Remove the cart line at the given position.
    """
    try:
        store.remove_item(index)
    except CartIndexError as e:
        raise _line_not_found(e)

    return _cart_response(store)


@router.delete("", response_model=CartResponse)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    """
    Clear all items from the cart.
    """
    store.clear()
    return _cart_response(store)


@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    request: CheckoutRequest,
    store: CartStore = Depends(get_cart_store),
    order_client: OrderApiClient = Depends(get_order_client)
):
    """
    Place an order for the cart.

    The cart is cleared only once the order API has accepted the order.
    """
    service = CheckoutService(store, order_client)

    try:
        order_id = service.checkout(
            customer_id=request.customer_id,
            delivery_address=request.delivery_address,
            payment_method=request.payment_method,
            notes=request.notes
        )
    except EmptyCartError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except CheckoutError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message
        )

    return CheckoutResponse(order_id=order_id, cart=_cart_response(store))
