"""Stock trading stream service: price subscriptions and bulk order uploads."""

__version__ = "0.1.0"
