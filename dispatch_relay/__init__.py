"""Webhook relay: forwards product-change notifications as GitHub dispatch events."""
