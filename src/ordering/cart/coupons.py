"""Cart discount management — command and handler.

Resolving a coupon code to an amount happens before this command is sent;
the cart only records the flat amount and the code it came from.
"""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class ApplyCartDiscount:
    """Apply a flat discount to a shopping cart."""

    cart_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    code = String(max_length=100)


@ordering.command_handler(part_of=ShoppingCart)
class ApplyCartDiscountHandler:
    @handle(ApplyCartDiscount)
    def apply_discount(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.apply_discount(command.amount, code=command.code)
        repo.add(cart)
