"""Plan pricing, billing cycles and the subscription lifecycle."""
