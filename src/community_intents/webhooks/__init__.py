"""Database webhook ingress for new chat messages."""
