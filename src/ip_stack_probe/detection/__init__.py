"""Host IP-stack detection: interface parsing, classification and NAT64 probing."""

# Submodules are imported explicitly by callers so that importing the package
# does not spawn processes, open sockets or configure logging.

__all__: list[str] = []
