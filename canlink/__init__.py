"""Raw CAN and ISO-TP send/receive tools over Linux SocketCAN."""

__version__ = "0.1.0"
__all__ = ["frames", "isotp", "netif", "raw"]