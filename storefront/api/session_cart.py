"""
Session-backed carts for the HTTP layer.

The cart lines live in the Django session between requests; each request
rebuilds a CartStore from them and saves every new snapshot back through a
subscription.
"""

from storefront.domain import CartItem, CartState
from storefront.services import CartStore

SESSION_KEY = "storefront_cart"


def _save(request, state: CartState) -> None:
    request.session[SESSION_KEY] = [item.to_dict() for item in state.items]


def load_cart(request) -> CartStore:
    store = CartStore.from_items(CartItem.from_dict(item) for item in request.session.get(SESSION_KEY, []))
    store.subscribe(lambda state: _save(request, state))
    return store


def session_key_for(request) -> str:
    if not request.session.session_key:
        request.session.save()
    return request.session.session_key


def user_id_for(request) -> str:
    """Authenticated user's pk, or a guest id tied to the session."""
    if request.user.is_authenticated:
        return str(request.user.pk)
    return f"guest-{session_key_for(request)}"
