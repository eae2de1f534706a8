"""
Protocol definition for notification backends.

Defines the interface the runner uses to deliver one message per entry.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """
    Protocol defining the interface for notification backends.

    The @runtime_checkable decorator allows using isinstance() checks
    against this protocol for structural typing validation.
    """

    async def notify(self, content: str) -> None:
        """
        Deliver a single message.

        Parameters
        ----------
        content : str
            The message text.

        Raises
        ------
        DeliveryError
            If the message was not accepted by the endpoint.
        """
        ...

    async def close(self) -> None:
        """
        Close the notifier and release any resources.

        This method should be called when shutting down the application
        to cleanly close connections and free resources.
        """
        ...
