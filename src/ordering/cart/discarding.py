"""Cart removal after checkout — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class DiscardCart:
    """Delete a cart that has been converted into an order."""

    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class DiscardCartHandler:
    @handle(DiscardCart)
    def discard_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        repo._dao.delete(cart)
