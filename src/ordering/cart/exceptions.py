"""Non-validation outcomes of cart operations."""


class ConfirmationRequired(Exception):
    """A destructive cart operation needs the shopper's explicit consent.

    Presentation code catches this, asks the shopper, and repeats the call
    with ``confirmed=True``. Declining simply means not repeating the call.
    """

    def __init__(self, product_id, name, action="remove"):
        self.product_id = str(product_id)
        self.name = name
        self.action = action
        super().__init__(f"Confirm {action} of {name} from the cart")

    def to_dict(self):
        return {"product_id": self.product_id, "name": self.name, "action": self.action}


class PersistenceError(Exception):
    """Cart state could not be written to (or read from) durable storage."""

    def __init__(self, key, reason):
        self.key = key
        self.reason = str(reason)
        super().__init__(f"Storage failure for {key!r}: {self.reason}")
